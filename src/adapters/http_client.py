"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza base URL, headers JSON, cookies de sesión y logging.
- Concentra el mapeo status HTTP -> taxonomía de errores del dominio.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from core.config import AppSettings
from core.domain.errors import (
    AuthError,
    ConflictError,
    NotFoundError,
    ServerError,
    TaskdeskError,
    TransportError,
    ValidationError,
)

logger = logging.getLogger(__name__)

JSON_HEADERS: dict[str, str] = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def build_async_client(
    settings: AppSettings | None = None,
    *,
    cookies: httpx.Cookies | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    extra_headers: dict[str, str] | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` apuntando al servicio de tareas.

    Por qué un builder:
    - Todas las peticiones llevan las mismas credenciales (cookie jar) y headers.
    - Sin timeout salvo que se configure (`http_timeout_seconds`).
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {"User-Agent": settings.user_agent, **JSON_HEADERS}
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=settings.normalized_base_url() + "/",
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        headers=headers,
        cookies=cookies,
        transport=transport,
    )


async def send(
    client: httpx.AsyncClient,
    method: str,
    path: str,
    *,
    json: Any | None = None,
) -> httpx.Response:
    """Envía una petición; los fallos de red se convierten en `TransportError`."""

    logger.debug("%s %s", method, path)
    try:
        response = await client.request(method, path, json=json)
    except httpx.HTTPError as exc:
        logger.warning("%s %s failed: %s", method, path, exc)
        raise TransportError(f"Request failed: {exc}") from exc
    logger.debug("%s %s -> %s", method, path, response.status_code)
    return response


def decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise TransportError(f"Invalid JSON in response ({response.status_code})") from exc


def error_message(response: httpx.Response, default: str) -> str:
    """Mensaje del cuerpo `{message}` si existe; si no, `default`."""

    try:
        payload = response.json()
    except ValueError:
        return default
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return default


def api_error(response: httpx.Response, default_message: str) -> TaskdeskError:
    """Traduce una respuesta no exitosa al error del dominio correspondiente."""

    status = response.status_code
    message = error_message(response, default_message)
    if status in (400, 422):
        return ValidationError(message=message)
    if status in (401, 403):
        return AuthError(message)
    if status == 404:
        return NotFoundError(message)
    if status == 409:
        return ConflictError(message, status_code=status)
    return ServerError(message, status_code=status)


def raise_for_api_error(response: httpx.Response, default_message: str) -> None:
    if response.is_success:
        return
    exc = api_error(response, default_message)
    logger.warning(
        "%s %s -> %s (%s)",
        response.request.method,
        response.request.url.path,
        response.status_code,
        exc.message,
    )
    raise exc
