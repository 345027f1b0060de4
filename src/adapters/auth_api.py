"""Adaptador HTTP: endpoints de autenticación.

Responsabilidad:
- Un método por endpoint (`/auth/sign-up`, `/auth/sign-in`, `/user`, `/auth/logout`).
- Sin estado propio: la sesión vive en el cookie jar del cliente httpx.
"""

from __future__ import annotations

import logging

import httpx
import pydantic

from adapters.http_client import decode_json, error_message, send
from core.domain.errors import ConflictError, ServerError, TransportError
from core.domain.models import Credentials, SessionProbe, User
from core.interfaces.remote import AuthAPI

logger = logging.getLogger(__name__)


class HttpAuthAPI(AuthAPI):
    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def sign_up(self, credentials: Credentials) -> dict[str, object]:
        response = await send(self._client, "POST", "auth/sign-up", json=credentials.model_dump())
        if not response.is_success:
            message = error_message(response, "Registration failed")
            logger.warning("Sign-up rejected (%s): %s", response.status_code, message)
            if response.status_code == 409:
                raise ConflictError(message, status_code=409)
            raise ServerError(message, status_code=response.status_code)

        # El cuerpo de éxito depende de la implementación del servidor.
        if not response.content:
            return {}
        payload = decode_json(response)
        return payload if isinstance(payload, dict) else {}

    async def sign_in(self, credentials: Credentials) -> bool:
        response = await send(self._client, "POST", "auth/sign-in", json=credentials.model_dump())
        if not response.is_success:
            logger.info("Sign-in rejected for %s (%s)", credentials.email, response.status_code)
        return response.is_success

    async def fetch_current_user(self) -> SessionProbe:
        try:
            response = await send(self._client, "GET", "user")
        except TransportError as exc:
            return SessionProbe.failed(exc.message)

        if not response.is_success:
            return SessionProbe.anonymous(f"HTTP {response.status_code}")

        try:
            user = User.model_validate(decode_json(response))
        except (TransportError, pydantic.ValidationError) as exc:
            logger.warning("Unexpected /user payload: %s", exc)
            return SessionProbe.failed("Unexpected response from /user")
        return SessionProbe.authenticated(user)

    async def logout(self) -> None:
        response = await send(self._client, "POST", "auth/logout")
        if not response.is_success:
            raise ServerError("Logout failed", status_code=response.status_code)
