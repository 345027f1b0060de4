# tests/test_cli.py

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from cli.main import CliState, app


@pytest.fixture()
def invoke(settings, server):
    runner = CliRunner()

    def _invoke(*args: str, input: str | None = None):
        state = CliState(settings=settings, transport=server.transport())
        return runner.invoke(app, list(args), obj=state, input=input)

    return _invoke


def _login(invoke) -> None:
    result = invoke("login", "--email", "ann@example.com", "--password", "secret")
    assert result.exit_code == 0, result.output
    assert "Hello, ann@example.com!" in result.output


def test_no_command_shows_welcome(invoke) -> None:
    result = invoke()
    assert result.exit_code == 0
    assert "Task Tracker" in result.output
    assert "Manage your tasks efficiently" in result.output


def test_session_survives_between_invocations(invoke, settings) -> None:
    _login(invoke)
    assert settings.resolved_session_file().exists()

    added = invoke("tasks", "add", "Buy milk", "--text", "2 liters")
    assert added.exit_code == 0, added.output
    assert "Added task #1" in added.output

    listed = invoke("tasks", "list")
    assert listed.exit_code == 0, listed.output
    assert "Incomplete Tasks (1)" in listed.output
    assert "Buy milk" in listed.output
    assert "No completed tasks" in listed.output


def test_done_then_delete(invoke) -> None:
    _login(invoke)
    invoke("tasks", "add", "Ship")

    done = invoke("tasks", "done", "1")
    assert done.exit_code == 0, done.output
    assert "Task #1 is now DONE." in done.output

    deleted = invoke("tasks", "delete", "1", "--yes")
    assert deleted.exit_code == 0, deleted.output
    assert "Deleted task #1." in deleted.output

    missing = invoke("tasks", "show", "1")
    assert missing.exit_code == 1
    assert "Task 1 not found" in missing.output


def test_logout_forgets_saved_session(invoke, settings) -> None:
    _login(invoke)
    result = invoke("logout")
    assert result.exit_code == 0, result.output
    assert not settings.resolved_session_file().exists()

    whoami = invoke("whoami")
    assert whoami.exit_code == 0
    assert "Not logged in." in whoami.output


def test_register_prints_field_errors(invoke, server) -> None:
    result = invoke("register", "--email", "bad", "--password", "ab", "--repeat-password", "ab")
    assert result.exit_code == 1
    assert "Invalid email format" in result.output
    assert "Password must contain at least 3 characters" in result.output
    assert server.requests == []


def test_wrong_password_and_anonymous_listing_fail(invoke) -> None:
    login = invoke("login", "--email", "ann@example.com", "--password", "nope")
    assert login.exit_code == 1
    assert "Invalid email or password" in login.output

    listed = invoke("tasks", "list")
    assert listed.exit_code == 1
    assert "Unauthorized" in listed.output


def test_whoami_offline_keeps_saved_session(invoke, settings, server) -> None:
    _login(invoke)
    saved = settings.resolved_session_file().read_text(encoding="utf-8")

    server.offline = True
    offline = invoke("whoami")
    assert offline.exit_code == 1
    assert "Could not check session" in offline.output
    assert settings.resolved_session_file().read_text(encoding="utf-8") == saved

    server.offline = False
    back = invoke("whoami")
    assert back.exit_code == 0, back.output
    assert "Hello, ann@example.com!" in back.output


def test_setup_api_updates_user_env(invoke, tmp_path, monkeypatch) -> None:
    env_path = tmp_path / "config" / ".env"
    env_path.parent.mkdir()
    env_path.write_text("TASKDESK_LOG_LEVEL=DEBUG\n", encoding="utf-8")
    monkeypatch.setattr("cli.doctor.get_user_env_file", lambda: env_path)

    result = invoke("doctor", "setup-api", "--base-url", "https://tasks.example.com/api/")
    assert result.exit_code == 0, result.output
    assert env_path.read_text(encoding="utf-8").splitlines() == [
        "# taskdesk user config (.env)",
        "TASKDESK_API_BASE_URL=https://tasks.example.com/api",
        "TASKDESK_LOG_LEVEL=DEBUG",
    ]


def test_setup_api_rejects_url_without_scheme(invoke, tmp_path, monkeypatch) -> None:
    env_path = tmp_path / ".env"
    monkeypatch.setattr("cli.doctor.get_user_env_file", lambda: env_path)

    result = invoke("doctor", "setup-api", "--base-url", "tasks.example.com")
    assert result.exit_code == 2
    assert not env_path.exists()
