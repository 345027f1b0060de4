"""Gestión de la sesión de autenticación.

`SessionManager` es dueño de la única `Session` del proceso y la mueve entre
Anónima y Autenticada:

- Anónima -> Autenticada: sign-in correcto, o sign-up seguido de un `/user`
  que devuelve usuario.
- Autenticada -> Anónima: logout (siempre, aunque falle el servidor) o un
  `/user` que responde sin sesión (`ANONYMOUS`).

Un `PROBE_FAILED` (red caída, cuerpo ilegible) no toca la sesión: no prueba
que la cookie guardada haya dejado de valer.

La validación de formularios corre antes de cualquier petición; un error de
validación nunca llega a la capa de red.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from core.domain.errors import ValidationError
from core.domain.models import (
    AuthResult,
    Credentials,
    ProbeOutcome,
    Session,
    SessionProbe,
    User,
)
from core.domain.validation import validate_login, validate_registration
from core.interfaces.remote import AuthAPI
from core.services.inflight import InFlightGuard

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


@dataclass
class SessionHooks:
    """Callbacks opcionales para capas externas (persistencia, refresco de UI)."""

    changed: Callable[[Session], None] | None = None


class SessionManager:
    def __init__(
        self,
        api: AuthAPI,
        *,
        guard: InFlightGuard | None = None,
        hooks: SessionHooks | None = None,
        session: Session | None = None,
    ) -> None:
        self._api = api
        self._guard = guard or InFlightGuard()
        self._hooks = hooks or SessionHooks()
        self._session = session or Session()

    @property
    def session(self) -> Session:
        return self._session

    @property
    def user(self) -> User | None:
        return self._session.user

    @property
    def is_authenticated(self) -> bool:
        return self._session.is_authenticated

    def _set_user(self, user: User | None) -> None:
        self._session = Session(user=user)
        if self._hooks.changed is not None:
            self._hooks.changed(self._session)

    async def sign_up(self, email: str, password: str, repeat_password: str | None = None) -> AuthResult:
        """Registra y después consulta `/user` para recoger la sesión abierta.

        Lanza `ValidationError` sin enviar nada si el formulario es inválido y
        `ConflictError`/`ServerError` si el servidor lo rechaza.
        """

        if repeat_password is None:
            repeat_password = password
        errors = validate_registration(email, password, repeat_password)
        if errors:
            raise ValidationError(errors)

        async with self._guard.claim("sign-up"):
            await self._api.sign_up(Credentials(email=email, password=password))
            logger.info("Registered %s", email)
            probe = await self._api.fetch_current_user()

        self._apply_probe(probe)
        if probe.outcome is ProbeOutcome.AUTHENTICATED:
            return AuthResult(ok=True, user=probe.user)
        return AuthResult(ok=False, error="Registration succeeded but no session was established")

    async def sign_in(self, email: str, password: str) -> AuthResult:
        """Inicia sesión; el usuario de la sesión es el email que se tecleó.

        Credenciales rechazadas -> `AuthResult(ok=False)`; fallos de red ->
        `TransportError`.
        """

        errors = validate_login(email, password)
        if errors:
            raise ValidationError(errors)

        async with self._guard.claim("sign-in"):
            ok = await self._api.sign_in(Credentials(email=email, password=password))

        if not ok:
            return AuthResult(ok=False, error=INVALID_CREDENTIALS)

        user = User(email=email)
        self._set_user(user)
        logger.info("Signed in as %s", email)
        return AuthResult(ok=True, user=user)

    async def probe(self) -> SessionProbe:
        """Consulta `/user`; solo `AUTHENTICATED` y `ANONYMOUS` cambian la sesión local."""

        async with self._guard.claim("session-probe"):
            probe = await self._api.fetch_current_user()
        self._apply_probe(probe)
        return probe

    async def get_current_user(self) -> User | None:
        """Usuario o None; aquí "anónimo" y "sonda fallida" se ven igual."""

        probe = await self.probe()
        return probe.user

    async def logout(self) -> None:
        try:
            async with self._guard.claim("logout"):
                await self._api.logout()
        finally:
            self._set_user(None)
            logger.info("Session cleared")

    def _apply_probe(self, probe: SessionProbe) -> None:
        if probe.outcome is ProbeOutcome.AUTHENTICATED and probe.user is not None:
            self._set_user(probe.user)
            return
        if probe.outcome is ProbeOutcome.PROBE_FAILED:
            logger.info("Session probe failed, keeping current session: %s", probe.reason)
            return
        self._set_user(None)
