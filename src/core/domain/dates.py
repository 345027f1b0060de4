"""Utilidades de fechas para los timestamps del backend.

El servicio envía timestamps como `"2025-12-25 13:25:24.224975"` (espacio en
lugar de `T`). Renderizar nunca lanza: un valor ausente se muestra como `"N/A"`
y uno ilegible como `"Invalid Date"`.
"""

from __future__ import annotations

import logging
from datetime import datetime

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"
INVALID_DATE = "Invalid Date"


def parse_backend_timestamp(value: str | None) -> datetime | None:
    """Interpreta un timestamp del backend; None si falta o está mal formado."""

    if not value:
        return None
    iso = value.strip().replace(" ", "T", 1)
    if iso.endswith("Z"):
        iso = iso[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(iso)
    except ValueError:
        logger.debug("Error parsing date: %r", value)
        return None


def format_date(value: str | None) -> str:
    if not value:
        return NOT_AVAILABLE
    parsed = parse_backend_timestamp(value)
    if parsed is None:
        return INVALID_DATE
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


def format_datetime(value: str | None) -> str:
    if not value:
        return NOT_AVAILABLE
    parsed = parse_backend_timestamp(value)
    if parsed is None:
        return INVALID_DATE
    return f"{parsed.month}/{parsed.day}/{parsed.year}, {parsed.strftime('%I:%M:%S %p').lstrip('0')}"
