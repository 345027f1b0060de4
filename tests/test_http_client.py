# tests/test_http_client.py

from __future__ import annotations

import httpx
import pytest

from adapters.http_client import api_error, build_async_client, error_message, send
from core.domain.errors import (
    AuthError,
    ConflictError,
    NotFoundError,
    ServerError,
    TransportError,
    ValidationError,
)


def _response(status: int, **kwargs) -> httpx.Response:
    return httpx.Response(status, request=httpx.Request("GET", "http://testserver/api/x"), **kwargs)


@pytest.mark.parametrize(
    ("status", "expected"),
    [
        (400, ValidationError),
        (401, AuthError),
        (404, NotFoundError),
        (409, ConflictError),
        (500, ServerError),
    ],
)
def test_api_error_maps_status(status: int, expected: type) -> None:
    exc = api_error(_response(status), "Failed")
    assert type(exc) is expected
    assert exc.message == "Failed"


def test_error_message_prefers_body_message() -> None:
    assert error_message(_response(409, json={"message": "User already exists"}), "x") == "User already exists"
    assert error_message(_response(500, text="<html>oops</html>"), "Registration failed") == "Registration failed"
    assert error_message(_response(500, json={"message": ""}), "fallback") == "fallback"


@pytest.mark.asyncio
async def test_client_composes_base_url_and_sends_json_headers(settings) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    async with build_async_client(settings, transport=httpx.MockTransport(handler)) as client:
        await send(client, "GET", "tasks")
        await send(client, "PUT", "tasks/7", json={"title": "t"})

    assert str(seen[0].url) == "http://testserver/api/tasks"
    assert str(seen[1].url) == "http://testserver/api/tasks/7"
    assert seen[1].headers["content-type"] == "application/json"
    assert seen[0].headers["accept"] == "application/json"


@pytest.mark.asyncio
async def test_network_failure_becomes_transport_error(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with build_async_client(settings, transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(TransportError):
            await send(client, "GET", "user")
