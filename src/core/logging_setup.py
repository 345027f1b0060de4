"""Configuración de logging.

La CLI llama a `setup_logging` una sola vez, antes del primer log; el resto
de módulos solo usa `logging.getLogger(__name__)`.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_APP_LOGGERS = ("core", "adapters", "cli")


class _ConsoleNoiseFilter(logging.Filter):
    """Deja pasar nuestros logs; terceros y `py.warnings` solo desde ERROR."""

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name.split(".", 1)[0] in _APP_LOGGERS:
            return True

        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    console_level: int | str = logging.WARNING,
    log_file: str | Path | None = None,
    file_level: int = logging.DEBUG,
) -> None:
    """Configura consola (filtrada) y, opcionalmente, un fichero con todo."""

    if isinstance(console_level, str):
        console_level = getattr(logging, console_level.upper(), logging.WARNING)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    logging.captureWarnings(True)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
