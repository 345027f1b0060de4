"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.dates import format_date, format_datetime
from core.domain.models import Task, TaskPartition, TaskStatus, User

_PREVIEW_CHARS = 60


def print_banner(console: Console) -> None:
    """Imprime la pantalla de bienvenida (usuario anónimo)."""

    title = Text("Task Tracker", style="bold cyan")
    subtitle = Text("Manage your tasks efficiently", style="dim")
    hint = Text("Create an account or login to start managing your tasks", style="italic")
    body = Align.center(Text.assemble(title, "\n", subtitle, "\n\n", hint), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def print_header(console: Console, user: User) -> None:
    console.print(f"[bold cyan]Task Tracker[/bold cyan]  Hello, {escape(user.email)}!")


def print_field_errors(console: Console, errors: dict[str, str]) -> None:
    for field, message in errors.items():
        console.print(f"[red]{field}:[/red] {escape(message)}")


def _preview(text: str) -> str:
    text = " ".join(text.split())
    if len(text) <= _PREVIEW_CHARS:
        return text
    return text[: _PREVIEW_CHARS - 1].rstrip() + "…"


def build_tasks_table(title: str, tasks: list[Task], *, completed: bool) -> Table:
    """Tabla de una sección del dashboard ("Incomplete Tasks (n)")."""

    table = Table(title=f"{title} ({len(tasks)})", title_justify="left", expand=True)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title", style="white")
    table.add_column("Text", style="dim")
    table.add_column("Completed" if completed else "Created", style="magenta", no_wrap=True)

    for task in tasks:
        title_cell = Text(task.title, style="strike" if completed else "")
        if task.status is TaskStatus.IN_PROGRESS:
            title_cell.append(" (in progress)", style="yellow")
        date = task.done_at if completed else task.created_at
        table.add_row(str(task.id), title_cell, escape(_preview(task.text)), format_date(date))
    return table


def print_dashboard(console: Console, partition: TaskPartition) -> None:
    if partition.incomplete:
        console.print(build_tasks_table("Incomplete Tasks", partition.incomplete, completed=False))
    else:
        console.print("[bold]Incomplete Tasks (0)[/bold]\n[dim]No incomplete tasks[/dim]")
    console.print()
    if partition.completed:
        console.print(build_tasks_table("Completed Tasks", partition.completed, completed=True))
    else:
        console.print("[bold]Completed Tasks (0)[/bold]\n[dim]No completed tasks[/dim]")


def build_task_panel(task: Task) -> Panel:
    """Panel de detalle (equivalente al editor modal, en solo lectura)."""

    body = Text()
    body.append("Task Title: ", style="bold")
    body.append(task.title + "\n")
    body.append("Task Description: ", style="bold")
    body.append((task.text or "-") + "\n")
    body.append("Status: ", style="bold")
    body.append(task.status.value + "\n")
    body.append(f"\nCreated: {format_datetime(task.created_at)}", style="dim")
    if task.done_at:
        body.append(f"\nCompleted: {format_datetime(task.done_at)}", style="dim")

    border = "green" if task.is_done else "yellow"
    return Panel(body, title=Text(f"Task #{task.id}", style="bold"), border_style=border)
