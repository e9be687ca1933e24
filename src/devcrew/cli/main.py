"""devcrew CLI: the main entry point."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from devcrew import __version__

app = typer.Typer(
    name="devcrew",
    help="Run a crew of named workers over a dependency-aware task plan.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()

_STATUS_STYLE = {
    "pending": "dim",
    "in-progress": "yellow",
    "completed": "green",
    "failed": "red",
}


def _setup_logging(level: str) -> None:
    """Route devcrew logs through rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    logging.getLogger("apscheduler").setLevel(logging.WARNING)


def _get_settings():
    from devcrew.config.settings import get_settings

    return get_settings()


@app.callback(invoke_without_command=True)
def version_callback(
    version: bool = typer.Option(False, "--version", "-v", help="Show version"),
):
    if version:
        console.print(f"devcrew [dim]v{__version__}[/dim]")
        raise typer.Exit()


@app.command()
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing config file"),
):
    """Write the current settings to ~/.devcrew/config.json."""
    from devcrew.config import settings as config_module

    if config_module.Settings.config_exists() and not force:
        console.print(
            f"[yellow]Config already exists:[/yellow] {config_module.CONFIG_FILE} "
            "[dim](use --force to overwrite)[/dim]"
        )
        raise typer.Exit(1)

    _get_settings().save()
    console.print(f"[green]Wrote[/green] {config_module.CONFIG_FILE}")


@app.command()
def team():
    """List the configured crew members."""
    settings = _get_settings()
    members = settings.team.members

    if not members:
        console.print("[dim]No crew members configured.[/dim]")
        raise typer.Exit()

    table = Table(title="Crew", show_lines=False)
    table.add_column("Name", style="bold")
    table.add_column("Role")
    table.add_column("Description", max_width=60)
    for member in members:
        table.add_row(member.name, member.role, member.description)

    console.print(table)
    console.print(f"\n  [dim]{len(members)} members.[/dim]\n")


@app.command()
def validate(
    plan_file: Path = typer.Argument(help="Path to a JSON task plan"),
):
    """Check a task plan without running it."""
    from devcrew.errors.exceptions import PlanError
    from devcrew.tasks.plan import load_plan

    try:
        entries = load_plan(plan_file)
    except PlanError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1)

    settings = _get_settings()
    known_workers = {m.name for m in settings.team.members}
    keys = {e.key for e in entries}

    table = Table(title=f"Plan: {plan_file.name}", show_lines=False)
    table.add_column("Key", style="bold")
    table.add_column("Title")
    table.add_column("Worker")
    table.add_column("Priority")
    table.add_column("Depends on", style="dim")

    problems = 0
    for entry in entries:
        worker = entry.assigned_to
        if worker not in known_workers:
            worker = f"[yellow]{worker} (unknown)[/yellow]"
            problems += 1
        deps = []
        for dep in entry.depends_on:
            if dep in keys:
                deps.append(dep)
            else:
                deps.append(f"[yellow]{dep} (unknown)[/yellow]")
                problems += 1
        table.add_row(entry.key, entry.title, worker, entry.priority.value, ", ".join(deps))

    console.print(table)
    if problems:
        console.print(
            f"\n  [yellow]{problems} warning(s):[/yellow] tasks for unknown workers will fail, "
            "tasks with unknown dependencies will never run.\n"
        )
    else:
        console.print(f"\n  [green]OK[/green] [dim]{len(entries)} tasks.[/dim]\n")


@app.command()
def run(
    plan_file: Path = typer.Argument(help="Path to a JSON task plan"),
    max_concurrent: Optional[int] = typer.Option(
        None, "--max-concurrent", "-c", help="Concurrency ceiling (default: config / unbounded)"
    ),
    interval: Optional[float] = typer.Option(
        None, "--interval", "-i", help="Seconds between scheduling ticks"
    ),
    attempts: Optional[int] = typer.Option(
        None, "--attempts", "-a", help="Execution attempts per task"
    ),
    retry_delay: Optional[float] = typer.Option(
        None, "--retry-delay", help="Seconds to wait between attempts"
    ),
    work_seconds: float = typer.Option(
        0.0, "--work-seconds", help="Simulated work time per task for the offline crew"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logs"),
):
    """Submit a task plan, run the scheduler until it settles, and report."""
    from devcrew.config.models import SchedulerConfig
    from devcrew.errors.exceptions import PlanError
    from devcrew.tasks.models import TaskStatus
    from devcrew.tasks.plan import load_plan

    settings = _get_settings()
    _setup_logging("DEBUG" if verbose else settings.log_level)

    try:
        entries = load_plan(plan_file)
    except PlanError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1)

    overrides = {
        "max_concurrent_tasks": max_concurrent,
        "tick_interval_seconds": interval,
        "max_attempts": attempts,
        "retry_delay_seconds": retry_delay,
    }
    try:
        config = SchedulerConfig.model_validate(
            {
                **settings.scheduler.model_dump(),
                **{k: v for k, v in overrides.items() if v is not None},
            }
        )
    except ValidationError as exc:
        console.print(f"[red]Invalid scheduler options:[/red] {exc.errors()[0]['msg']}")
        raise typer.Exit(1)

    store, errors = asyncio.run(
        _run_plan(entries, config, settings.team.members, work_seconds=work_seconds)
    )
    _print_results(store)

    failed = store.find_by_status(TaskStatus.FAILED)
    blocked = store.find_by_status(TaskStatus.PENDING)
    console.print(
        f"\n  [dim]{len(store)} tasks: "
        f"{len(store) - len(failed) - len(blocked)} completed, "
        f"{len(failed)} failed, {len(blocked)} blocked. "
        f"{len(errors.errors())} error(s) recorded.[/dim]\n"
    )
    if failed or blocked:
        raise typer.Exit(1)


async def _run_plan(entries, config, members, *, work_seconds: float = 0.0, poll_seconds: float = 0.05):
    """Wire a crew, submit the plan and tick until nothing is left to do."""
    from devcrew.errors.handler import ErrorHandler
    from devcrew.memory.context import ContextMemory
    from devcrew.scheduler.engine import SchedulerEngine
    from devcrew.tasks.plan import submit_plan
    from devcrew.tasks.store import TaskStore
    from devcrew.workers.team import build_team

    memory = ContextMemory()
    store = TaskStore()
    errors = ErrorHandler(memory)
    registry = build_team(members, memory, work_seconds=work_seconds)
    submit_plan(entries, store)

    engine = SchedulerEngine(store, registry, errors, config=config)
    engine.start()
    # First pass right away instead of waiting a full interval.
    engine.tick()
    try:
        while not engine.is_idle():
            await asyncio.sleep(poll_seconds)
    finally:
        engine.stop()
        await engine.wait_idle()
    return store, errors


def _print_results(store) -> None:
    table = Table(title="Tasks", show_lines=False)
    table.add_column("ID", style="dim", max_width=17)
    table.add_column("Title", style="bold")
    table.add_column("Worker")
    table.add_column("Priority")
    table.add_column("Status")
    table.add_column("Attempts", justify="right")
    table.add_column("Outcome", max_width=50)

    for task in store.all():
        style = _STATUS_STYLE.get(task.status.value, "")
        outcome = task.result or task.error or ""
        table.add_row(
            task.id,
            task.title,
            task.assigned_to,
            task.priority.value,
            f"[{style}]{task.status.value}[/{style}]",
            str(task.attempts),
            outcome[:50] + ("..." if len(outcome) > 50 else ""),
        )

    console.print(table)


if __name__ == "__main__":
    app()
