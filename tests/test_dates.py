# tests/test_dates.py

from __future__ import annotations

from datetime import datetime

from core.domain.dates import format_date, format_datetime, parse_backend_timestamp


def test_parses_backend_space_separated_timestamp() -> None:
    assert parse_backend_timestamp("2025-12-25 13:25:24.224975") == datetime(2025, 12, 25, 13, 25, 24, 224975)


def test_format_date_edge_cases() -> None:
    assert format_date(None) == "N/A"
    assert format_date("") == "N/A"
    assert format_date("not a date") == "Invalid Date"
    assert format_date("2025-12-25 13:25:24.224975") == "12/25/2025"


def test_format_datetime() -> None:
    assert format_datetime("2025-01-05T08:03:09") == "1/5/2025, 8:03:09 AM"
    assert format_datetime("2025-01-05 20:03:09") == "1/5/2025, 8:03:09 PM"
    assert format_datetime(None) == "N/A"
