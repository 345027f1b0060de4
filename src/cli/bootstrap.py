"""Cableado del cliente para una invocación de la CLI.

`open_app` construye el cliente HTTP con las cookies guardadas, los
adaptadores y los dos servicios, y vuelca la sesión a disco cada vez que
cambia. No hay instancias de servicio a nivel de módulo: todo vive lo que dura
el bloque `async with`.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from pathlib import Path

import httpx

from adapters.auth_api import HttpAuthAPI
from adapters.http_client import build_async_client
from adapters.session_store import (
    clear_session,
    cookies_from_stored,
    load_session,
    save_session,
    stored_from_cookies,
)
from adapters.tasks_api import HttpTasksAPI
from core.config import AppSettings
from core.domain.models import Session, User
from core.services.inflight import InFlightGuard
from core.services.session_manager import SessionHooks, SessionManager
from core.services.task_store import TaskStore

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: AppSettings
    client: httpx.AsyncClient
    sessions: SessionManager
    tasks: TaskStore


def _persist(path: Path, client: httpx.AsyncClient, session: Session) -> None:
    if session.user is None:
        client.cookies.clear()
        clear_session(path)
        return
    save_session(path, stored_from_cookies(client.cookies, email=session.user.email))


@contextlib.asynccontextmanager
async def open_app(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[AppContext]:
    settings = settings or AppSettings()
    session_path = settings.resolved_session_file()
    stored = load_session(session_path)

    async with build_async_client(
        settings,
        cookies=cookies_from_stored(stored),
        transport=transport,
    ) as client:
        guard = InFlightGuard()
        initial = Session(user=User(email=stored.email) if stored.email else None)
        hooks = SessionHooks(changed=lambda session: _persist(session_path, client, session))
        ctx = AppContext(
            settings=settings,
            client=client,
            sessions=SessionManager(HttpAuthAPI(client), guard=guard, hooks=hooks, session=initial),
            tasks=TaskStore(HttpTasksAPI(client), guard=guard),
        )
        logger.debug("Client ready for %s", settings.normalized_base_url())
        yield ctx

        # El servidor puede renovar la cookie en cualquier respuesta.
        if ctx.sessions.is_authenticated:
            _persist(session_path, client, ctx.sessions.session)
