"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adapters.http_client import build_async_client, send
from adapters.session_store import load_session
from core.config import AppSettings, get_user_env_file, write_user_env_vars
from core.domain.errors import TransportError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_api(settings: AppSettings) -> tuple[bool, str]:
    """Probe `GET /user`: any HTTP answer means the service is reachable."""

    try:
        async with build_async_client(settings) as client:
            response = await send(client, "GET", "user")
    except TransportError as exc:
        return False, exc.message
    return True, f"HTTP {response.status_code}"


def _settings_from(ctx: typer.Context) -> AppSettings:
    state = ctx.find_root().obj
    settings = getattr(state, "settings", None)
    return settings if isinstance(settings, AppSettings) else AppSettings()


@app.command()
def run(ctx: typer.Context) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = _settings_from(ctx)

    table = Table(title="Task Tracker Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("API base URL", "OK", settings.normalized_base_url())
    if settings.http_timeout_seconds is None:
        table.add_row("HTTP timeout", "OK", "none (transport default)")
    else:
        table.add_row("HTTP timeout", "OK", f"{settings.http_timeout_seconds:g}s")

    session_path = settings.resolved_session_file()
    stored = load_session(session_path)
    if stored.email:
        table.add_row("Saved session", "OK", f"{stored.email} ({session_path})")
    else:
        table.add_row("Saved session", "NONE", "Run `taskdesk login`")

    ok_api, detail_api = asyncio.run(_check_api(settings))
    table.add_row("API connectivity", "OK" if ok_api else "FAIL", escape(detail_api))

    _console.print(table)

    if not ok_api:
        _console.print(
            "\n[yellow]Note:[/yellow] Set the service URL with `taskdesk doctor setup-api` "
            "or TASKDESK_API_BASE_URL."
        )
        raise typer.Exit(code=1)


@app.command(name="setup-api")
def setup_api(
    base_url: str = typer.Option(
        ...,
        prompt="API base URL",
        help="Service base URL, e.g. http://localhost:8080/api",
    ),
) -> None:
    """Store the service URL in the user config .env."""

    base_url = base_url.strip().rstrip("/")
    if not base_url.startswith(("http://", "https://")):
        raise typer.BadParameter("base URL must start with http:// or https://")

    env_path = write_user_env_vars({"TASKDESK_API_BASE_URL": base_url}, env_path=get_user_env_file())
    _console.print(f"[green]Saved API config to:[/green] {env_path}")
