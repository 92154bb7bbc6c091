from taskcli.domain.errors import TaskNotFoundError, TaskValidationError, DomainError, RepositoryError
from taskcli.domain.task import Task, TaskId
from taskcli.domain.enums import TaskStatus
from taskcli.services.task_service import TaskService
from taskcli.ports.task_repository import TaskRepository
from taskcli.adapters.memory.task_repo import InMemoryTaskRepository
from taskcli.adapters.file.task_repo import JsonFileTaskRepository
from taskcli.adapters.sql.task_repo import SqlTaskRepository
from taskcli.api.colors import TaskColor
from taskcli.config import Settings, load_settings, validate_backend, validate_log_level
from taskcli.logging_setup import setup_logging
from typer import Argument, Context, Exit, Option, Typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.panel import Panel
from dataclasses import replace
from pathlib import Path
from typing import Callable, Optional
import logging

logger = logging.getLogger(__name__)


### COMMENTS
# ==========================================================
# CLI (Typer + Rich) - user interface for the task tracker.
# ==========================================================
# Role:
# - Maps commands onto TaskService methods (add/update/delete/mark-*/list).
# - Renders results (tables, panels, colors).
# - DomainError -> friendly message, exit code 0.
# - RepositoryError (disk, broken file, database) -> message, exit code 1.
#
# Rules:
# - No business logic here, everything goes through TaskService.
# - The service is built once per invocation in the callback and travels in ctx.obj.


app = Typer(help="Task Tracker CLI", no_args_is_help=True)
console = Console()


def build_repository(settings: Settings) -> TaskRepository:
    """Picks the adapter for the configured backend.
    - file   -> JSON file (default, durable)
    - sql    -> SQLite/SQLAlchemy (durable)
    - memory -> volatile, lost when the process exits
    """
    if settings.backend == "sql":
        return SqlTaskRepository(settings.db_url)
    if settings.backend == "memory":
        return InMemoryTaskRepository()
    return JsonFileTaskRepository(settings.tasks_file)


def build_service(settings: Settings) -> TaskService:
    return TaskService(build_repository(settings))


@app.callback()
def main(
    ctx: Context,
    file: Optional[Path] = Option(None, "--file", "-f", help="Path to the JSON data file"),
    backend: Optional[str] = Option(None, "--backend", "-b", help="Storage backend: file, sql or memory"),
    db_url: Optional[str] = Option(None, "--db-url", help="SQLAlchemy URL for the sql backend"),
    log_level: Optional[str] = Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR"),
    verbose: bool = Option(False, "--verbose", "-v", help="Shortcut for --log-level INFO"),
) -> None:
    """Bootstraps settings, logging and the service for this invocation."""
    try:
        settings = load_settings()
        overrides = {}
        if file is not None:
            overrides["tasks_file"] = file
        if backend is not None:
            overrides["backend"] = validate_backend(backend)
        if db_url is not None:
            overrides["db_url"] = db_url
        if log_level is not None:
            overrides["log_level"] = validate_log_level(log_level)
        elif verbose:
            overrides["log_level"] = "INFO"
        settings = replace(settings, **overrides)
    except ValueError as e:
        console.print(Panel.fit(f"❌ {escape(str(e))}", title="Configuration error", border_style="red"))
        raise Exit(code=2)

    setup_logging(settings.log_level)
    logger.debug("Settings: %s", settings)

    try:
        ctx.obj = build_service(settings)
    except RepositoryError as e:
        _print_environment_error(e)
        raise Exit(code=1)


def color_status(status: TaskStatus) -> str:
    """Returns the status as Rich markup with a color."""
    match status:
        case TaskStatus.TODO:
            return f"{TaskColor.RED}TODO{TaskColor.RESET}"
        case TaskStatus.IN_PROGRESS:
            return f"{TaskColor.YELLOW}IN-PROGRESS{TaskColor.RESET}"
        case TaskStatus.DONE:
            return f"{TaskColor.GREEN}DONE{TaskColor.RESET}"
        case _:
            return str(status).upper()


def render_list(items: list[Task]) -> None:
    """Renders a Rich table with columns: ID, Status, Description, Created, Updated."""

    table = Table(show_lines=True, header_style="bold")
    table.add_column("ID", no_wrap=True, style="cyan")
    table.add_column("Status", no_wrap=True)
    table.add_column("Description")
    table.add_column("Created", no_wrap=True, style="dim")
    table.add_column("Updated", no_wrap=True, style="dim")

    for t in items:
        table.add_row(
            str(t.task_id),
            color_status(t.status),
            escape(t.description),
            t.created_at.strftime("%Y-%m-%d %H:%M:%S"),
            t.updated_at.strftime("%Y-%m-%d %H:%M:%S"),
        )

    console.print(table)
    console.print(f"[dim]Total: {len(items)}[/dim]")


def _print_environment_error(e: RepositoryError) -> None:
    console.print(Panel.fit(
        f"❌ {escape(str(e))}\n[dim]Check the data file or database, then try again.[/]",
        title="Storage error",
        border_style="red",
    ))


def _run(action: Callable[[], None], task_id: int | None = None) -> None:
    """Runs one use case and turns its errors into panels and exit codes."""
    try:
        action()
    except TaskNotFoundError as e:
        console.print(Panel.fit(
            f"❌ {e}\n[dim]Use 'task-cli list' to find a valid ID[/]",
            title="Not found",
            border_style="red",
        ))
    except TaskValidationError as e:
        console.print(Panel.fit(
            f"❌ {escape(str(e))}\n[dim]Hint:[/] task-cli add \"Task description\"",
            title="Validation error",
            border_style="red",
        ))
    except DomainError as e:
        console.print(Panel.fit(f"❌ {escape(str(e))}", title="Domain error", border_style="red"))
    except RepositoryError as e:
        logger.debug("Storage failure for task %s", task_id, exc_info=True)
        _print_environment_error(e)
        raise Exit(code=1)


@app.command("add")
def add(ctx: Context, description: str = Argument(..., help="Task description")) -> None:
    """Adds a new task."""
    service: TaskService = ctx.obj

    def action() -> None:
        task = service.add_task(description)
        console.print(Panel.fit(
            f"✅ Task added successfully (ID: {task.task_id})\n"
            f"[dim]Description:[/dim] {escape(task.description)}",
            title="Success",
            border_style="green",
        ))

    _run(action)


@app.command("update")
def update(
    ctx: Context,
    task_id: int = Argument(..., help="Task ID"),
    description: str = Argument(..., help="New description"),
) -> None:
    """Changes the description of a task."""
    service: TaskService = ctx.obj

    def action() -> None:
        service.update_task(TaskId(task_id), description)
        console.print(Panel.fit("✅ Task updated successfully", title="Success", border_style="green"))

    _run(action, task_id)


@app.command("delete")
def delete(ctx: Context, task_id: int = Argument(..., help="Task ID")) -> None:
    """Deletes a task."""
    service: TaskService = ctx.obj

    def action() -> None:
        service.delete_task(TaskId(task_id))
        console.print(Panel.fit(
            f"🟡 Task deleted successfully\nID: {task_id}",
            title="Deleted",
            border_style="yellow",
        ))

    _run(action, task_id)


@app.command("mark-in-progress")
def mark_in_progress(ctx: Context, task_id: int = Argument(..., help="Task ID")) -> None:
    """Sets task status to in-progress."""
    service: TaskService = ctx.obj

    def action() -> None:
        task = service.mark_task_in_progress(TaskId(task_id))
        console.print(Panel.fit(
            f"✅ Task marked as in progress\nID: {task.task_id}\nStatus: {color_status(task.status)}",
            title="Success",
            border_style="green",
        ))

    _run(action, task_id)


@app.command("mark-done")
def mark_done(ctx: Context, task_id: int = Argument(..., help="Task ID")) -> None:
    """Sets task status to done."""
    service: TaskService = ctx.obj

    def action() -> None:
        task = service.mark_task_done(TaskId(task_id))
        console.print(Panel.fit(
            f"✅ Task marked as done\nID: {task.task_id}\nStatus: {color_status(task.status)}",
            title="Success",
            border_style="green",
        ))

    _run(action, task_id)


@app.command("list")
def list_cmd(
    ctx: Context,
    status: Optional[TaskStatus] = Argument(None, help="Filter: todo, in-progress or done"),
) -> None:
    """Lists tasks, optionally only those with the given status."""
    service: TaskService = ctx.obj

    def action() -> None:
        items = service.list_tasks(status.value if status else "")
        if not items:
            if status is None:
                console.print("No tasks found")
            else:
                console.print(f"No tasks with status '{status.value}' found")
            return
        render_list(items)

    _run(action)


@app.command("demo")
def demo() -> None:
    """
    Scripted walkthrough on a volatile repository; nothing is written to disk.
    """
    service = TaskService(InMemoryTaskRepository())

    console.print(Panel.fit("🚀 Task Tracker demo", border_style="cyan"))

    t1 = service.add_task("Buy groceries")
    t2 = service.add_task("Write project report")
    t3 = service.add_task("Call mom")
    console.print("\n📋 Current tasks:")
    render_list(service.list_tasks())

    service.mark_task_in_progress(t1.task_id)
    console.print(Panel.fit(f"🚀 Started: {t1.task_id} ({t1.description})", border_style="yellow"))

    service.mark_task_done(t2.task_id)
    console.print(Panel.fit(f"✔️ Completed: {t2.task_id} ({t2.description})", border_style="green"))

    service.update_task(t3.task_id, "Call mom and discuss weekend plans")
    console.print(Panel.fit(f"📝 Updated: {t3.task_id}", border_style="blue"))

    for status in TaskStatus:
        console.print(f"\n🎯 {str(status).upper()}:")
        render_list(service.list_tasks(status.value))

    console.print(Panel.fit("🏁 Demo complete", border_style="cyan"))


if __name__ == "__main__":
    app()
