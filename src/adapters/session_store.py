"""Persistencia de la sesión entre invocaciones de la CLI.

Por qué JSON:
- Cada comando es un proceso nuevo; la cookie de sesión del servidor tiene que
  sobrevivir entre `login` y `tasks list`.
- Formato estable y legible, igual que el resto de ficheros de usuario.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import httpx
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class StoredCookie(BaseModel):
    name: str
    value: str
    domain: str = ""
    path: str = "/"


class StoredSession(BaseModel):
    email: str | None = Field(
        default=None,
        description="Último email autenticado (para mostrarlo sin red).",
    )
    cookies: list[StoredCookie] = Field(default_factory=list)


def cookies_from_stored(stored: StoredSession) -> httpx.Cookies:
    cookies = httpx.Cookies()
    for c in stored.cookies:
        cookies.set(c.name, c.value, domain=c.domain, path=c.path)
    return cookies


def stored_from_cookies(cookies: httpx.Cookies, *, email: str | None) -> StoredSession:
    return StoredSession(
        email=email,
        cookies=[
            StoredCookie(name=c.name, value=c.value or "", domain=c.domain, path=c.path)
            for c in cookies.jar
        ],
    )


def load_session(path: Path) -> StoredSession:
    """Lee la sesión guardada; un fichero ausente o corrupto equivale a anónimo."""

    if not path.exists():
        return StoredSession()
    try:
        return StoredSession.model_validate_json(path.read_text(encoding="utf-8"))
    except ValueError:
        logger.warning("Ignoring unreadable session file: %s", path)
        return StoredSession()


def save_session(path: Path, session: StoredSession) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = session.model_dump(mode="json")
    path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return path


def clear_session(path: Path) -> None:
    path.unlink(missing_ok=True)
