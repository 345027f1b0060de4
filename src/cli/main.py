"""CLI principal (Typer).

Responsabilidad:
- Traducir comandos a llamadas de `SessionManager` / `TaskStore`.
- Presentar resultados con Rich; cualquier error del dominio se imprime una
  sola vez y el comando termina con código 1.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import httpx
import typer
from rich.console import Console
from rich.markup import escape

from cli import doctor
from cli.bootstrap import AppContext, open_app
from cli.ui_components import (
    build_task_panel,
    print_banner,
    print_dashboard,
    print_field_errors,
    print_header,
)
from core.config import AppSettings
from core.domain.errors import NotFoundError, ServerError, TaskdeskError, ValidationError
from core.domain.models import ProbeOutcome, Task, TaskStatus
from core.logging_setup import setup_logging
from core.services.task_store import has_changes

logger = logging.getLogger(__name__)

T = TypeVar("T")

app = typer.Typer(
    invoke_without_command=True,
    help="Task Tracker: manage your tasks from the terminal.",
)
tasks_app = typer.Typer(no_args_is_help=True, help="List, create, edit and delete tasks.")
app.add_typer(tasks_app, name="tasks")
app.add_typer(doctor.app, name="doctor")

_console = Console()


@dataclass
class CliState:
    """Per-invocation state shared by the callback and the commands."""

    settings: AppSettings | None = None
    transport: httpx.AsyncBaseTransport | None = None


@app.callback()
def main(
    ctx: typer.Context,
    api_url: str | None = typer.Option(None, "--api-url", help="Override the service base URL."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests to stderr."),
) -> None:
    state = ctx.obj if isinstance(ctx.obj, CliState) else CliState()
    settings = state.settings or AppSettings()
    if api_url:
        settings = settings.model_copy(update={"api_base_url": api_url})
    state.settings = settings

    setup_logging(
        console_level=logging.DEBUG if verbose else settings.log_level,
        log_file=settings.log_file,
    )
    ctx.obj = state

    if ctx.invoked_subcommand is None:
        print_banner(_console)
        typer.echo(ctx.get_help())


def _execute(ctx: typer.Context, action: Callable[[AppContext], Awaitable[T]]) -> T:
    """Run one async action against a freshly wired client."""

    state = ctx.find_root().obj
    if not isinstance(state, CliState):
        state = CliState()

    async def _go() -> T:
        async with open_app(state.settings, transport=state.transport) as app_ctx:
            return await action(app_ctx)

    try:
        return asyncio.run(_go())
    except ValidationError as exc:
        if exc.errors:
            print_field_errors(_console, exc.errors)
        else:
            _console.print(f"[red]{escape(exc.message)}[/red]")
        raise typer.Exit(code=1) from exc
    except TaskdeskError as exc:
        logger.debug("Command failed", exc_info=True)
        _console.print(f"[red]{escape(exc.message)}[/red]")
        raise typer.Exit(code=1) from exc


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


@app.command()
def register(
    ctx: typer.Context,
    email: str = typer.Option(..., prompt=True, help="Account email."),
    password: str = typer.Option(..., prompt=True, hide_input=True),
    repeat_password: str = typer.Option(..., prompt="Repeat password", hide_input=True),
) -> None:
    """Create an account and open a session."""

    async def action(app_ctx: AppContext) -> None:
        result = await app_ctx.sessions.sign_up(email, password, repeat_password)
        if result.ok and result.user is not None:
            print_header(_console, result.user)
            return
        _console.print(f"[yellow]{escape(result.error or '')}[/yellow]")

    _execute(ctx, action)


@app.command()
def login(
    ctx: typer.Context,
    email: str = typer.Option(..., prompt=True),
    password: str = typer.Option(..., prompt=True, hide_input=True),
) -> None:
    """Sign in with email and password."""

    async def action(app_ctx: AppContext) -> bool:
        result = await app_ctx.sessions.sign_in(email, password)
        if result.ok and result.user is not None:
            print_header(_console, result.user)
            return True
        _console.print(f"[red]{escape(result.error or 'Login failed')}[/red]")
        return False

    if not _execute(ctx, action):
        raise typer.Exit(code=1)


@app.command()
def logout(ctx: typer.Context) -> None:
    """End the session. The local session is cleared even if the server fails."""

    async def action(app_ctx: AppContext) -> None:
        try:
            await app_ctx.sessions.logout()
        except ServerError as exc:
            logger.warning("Logout error: %s", exc.message)
            _console.print(f"[yellow]{escape(exc.message)}; local session cleared.[/yellow]")
            return
        _console.print("Logged out.")

    _execute(ctx, action)


@app.command()
def whoami(ctx: typer.Context) -> None:
    """Check whether the server still recognizes the session."""

    async def action(app_ctx: AppContext) -> ProbeOutcome:
        probe = await app_ctx.sessions.probe()
        if probe.outcome is ProbeOutcome.AUTHENTICATED and probe.user is not None:
            print_header(_console, probe.user)
        elif probe.outcome is ProbeOutcome.ANONYMOUS:
            _console.print("Not logged in.")
        else:
            _console.print(f"[red]Could not check session: {escape(probe.reason or '')}[/red]")
        return probe.outcome

    if _execute(ctx, action) is ProbeOutcome.PROBE_FAILED:
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


async def _load_task(app_ctx: AppContext, task_id: int) -> Task:
    await app_ctx.tasks.load()
    task = app_ctx.tasks.get(task_id)
    if task is None:
        raise NotFoundError(f"Task {task_id} not found")
    return task


@tasks_app.command("list")
def list_tasks(ctx: typer.Context) -> None:
    """Show incomplete and completed tasks."""

    async def action(app_ctx: AppContext) -> None:
        await app_ctx.tasks.load()
        if app_ctx.sessions.user is not None:
            print_header(_console, app_ctx.sessions.user)
        print_dashboard(_console, app_ctx.tasks.partition())

    _execute(ctx, action)


@tasks_app.command("add")
def add_task(
    ctx: typer.Context,
    title: str = typer.Argument(..., help="Task title."),
    text: str = typer.Option("", "--text", "-t", help="Optional description."),
) -> None:
    """Create a task."""

    async def action(app_ctx: AppContext) -> None:
        task = await app_ctx.tasks.create(title, text)
        _console.print(f"[green]Added task #{task.id}:[/green] {escape(task.title)}")

    _execute(ctx, action)


@tasks_app.command("show")
def show_task(ctx: typer.Context, task_id: int = typer.Argument(..., metavar="ID")) -> None:
    async def action(app_ctx: AppContext) -> None:
        _console.print(build_task_panel(await _load_task(app_ctx, task_id)))

    _execute(ctx, action)


@tasks_app.command("edit")
def edit_task(
    ctx: typer.Context,
    task_id: int = typer.Argument(..., metavar="ID"),
    title: str | None = typer.Option(None, "--title", help="New title."),
    text: str | None = typer.Option(None, "--text", help="New description."),
    completed: bool | None = typer.Option(None, "--done/--todo", help="Mark as completed or not."),
) -> None:
    """Edit a task. All fields are resent; nothing is sent when nothing changed."""

    async def action(app_ctx: AppContext) -> None:
        task = await _load_task(app_ctx, task_id)
        new_title = task.title if title is None else title
        new_text = task.text if text is None else text
        new_completed = task.is_done if completed is None else completed

        if not has_changes(task, title=new_title, text=new_text, completed=new_completed):
            _console.print("No changes.")
            return

        status = task.status
        if new_completed != task.is_done:
            status = TaskStatus.from_completed(new_completed)
        updated = await app_ctx.tasks.update(task_id, title=new_title, text=new_text, status=status)
        _console.print(build_task_panel(updated))

    _execute(ctx, action)


def _set_completed(ctx: typer.Context, task_id: int, completed: bool) -> None:
    async def action(app_ctx: AppContext) -> None:
        await _load_task(app_ctx, task_id)
        updated = await app_ctx.tasks.set_completed(task_id, completed)
        _console.print(f"Task #{updated.id} is now {updated.status.value}.")

    _execute(ctx, action)


@tasks_app.command("done")
def done_task(ctx: typer.Context, task_id: int = typer.Argument(..., metavar="ID")) -> None:
    """Mark a task as completed."""

    _set_completed(ctx, task_id, True)


@tasks_app.command("reopen")
def reopen_task(ctx: typer.Context, task_id: int = typer.Argument(..., metavar="ID")) -> None:
    """Move a completed task back to TODO."""

    _set_completed(ctx, task_id, False)


@tasks_app.command("delete")
def delete_task(
    ctx: typer.Context,
    task_id: int = typer.Argument(..., metavar="ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Delete a task permanently."""

    if not yes:
        typer.confirm("Are you sure you want to delete this task?", abort=True)

    async def action(app_ctx: AppContext) -> None:
        await app_ctx.tasks.delete(task_id)
        _console.print(f"Deleted task #{task_id}.")

    _execute(ctx, action)


def run() -> None:
    app(prog_name="taskdesk")
