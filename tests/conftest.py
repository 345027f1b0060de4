# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from core.config import AppSettings

from .fakes import FakeTaskServer

BASE_URL = "http://testserver/api"


@pytest.fixture()
def settings(tmp_path: Path) -> AppSettings:
    """
    Settings pointing at the fake server, with the session file in tmp.

    Passed explicitly so a developer's .env never leaks into tests.
    """
    return AppSettings(
        api_base_url=BASE_URL,
        session_file=tmp_path / "session.json",
        log_level="WARNING",
    )


@pytest.fixture()
def server() -> FakeTaskServer:
    return FakeTaskServer(users={"ann@example.com": "secret"})
