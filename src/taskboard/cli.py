"""CLI entry point for Taskboard.

``taskboard serve`` runs the REST API; the other commands load the board from
that API and apply one change through the optimistic update coordinator.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

import click

from taskboard.board import BoardError, DeleteConfirmation
from taskboard.board.models import DEFAULT_COLUMN_COLOR, TODO
from taskboard.config import ConfigError, TaskboardConfig, load_config
from taskboard.coordinator import Mutation, MutationState, OptimisticUpdateCoordinator
from taskboard.gateway import RemoteTaskGateway
from taskboard.logging import setup_logging

BoardAction = Callable[[OptimisticUpdateCoordinator], Awaitable[Any]]


def _run_on_board(config: TaskboardConfig, action: BoardAction) -> Any:
    """Load the board, run ``action`` against it and close the connection."""

    async def run() -> Any:
        gateway = RemoteTaskGateway(base_url=config.api_url, timeout=config.request_timeout)
        coordinator = OptimisticUpdateCoordinator(gateway, timeout=config.request_timeout)
        try:
            await coordinator.load()
            return await action(coordinator)
        finally:
            await gateway.close()

    try:
        return asyncio.run(run())
    except BoardError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _report(mutation: Mutation | None, done_message: str) -> None:
    if mutation is None:
        click.echo("Nothing to do.")
    elif mutation.state == MutationState.FAILED:
        click.echo(f"Failed: {mutation.error}", err=True)
        sys.exit(1)
    else:
        click.echo(done_message.format(result=mutation.result, target=mutation.target_id))


@click.group()
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Path to taskboard.yaml (auto-detected if not specified)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """Taskboard - a kanban to-do board."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    setup_logging(
        log_dir=config.log_dir,
        level="DEBUG" if verbose else config.log_level,
        console=verbose or ctx.invoked_subcommand == "serve",
    )
    ctx.obj = config


@main.command()
@click.option("--host", default=None, help="Bind address (default: from config)")
@click.option("--port", type=int, default=None, help="Port (default: from config)")
@click.option("--db", "db_path", default=None, help="SQLite database path (default: from config)")
@click.pass_obj
def serve(
    config: TaskboardConfig, host: str | None, port: int | None, db_path: str | None
) -> None:
    """Run the REST API."""
    import uvicorn  # noqa: PLC0415

    from taskboard.api import create_app  # noqa: PLC0415

    app = create_app(db_path=db_path or config.db_path)
    uvicorn.run(app, host=host or config.host, port=port or config.port, log_level="info")


@main.command()
@click.pass_obj
def board(config: TaskboardConfig) -> None:
    """Show all columns and their tasks."""

    async def show(coordinator: OptimisticUpdateCoordinator) -> None:
        store = coordinator.store
        for column in store.columns:
            marker = "" if column.is_fixed else " (custom)"
            click.echo(f"{column.display_title} [{column.id}]{marker}")
            tasks = store.tasks_in_column(column.id)
            if not len(tasks):
                click.echo("  No tasks yet")
            for task in tasks:
                click.echo(f"  - {task.title}  ({task.id})")

    _run_on_board(config, show)


@main.command()
@click.argument("title")
@click.option("--column", "status", default=TODO, show_default=True, help="Column to add to")
@click.pass_obj
def add(config: TaskboardConfig, title: str, status: str) -> None:
    """Add a task."""
    mutation = _run_on_board(config, lambda c: c.add_task(title, status))
    _report(mutation, "Added task {result.id}")


@main.command()
@click.argument("task_id")
@click.argument("title")
@click.pass_obj
def edit(config: TaskboardConfig, task_id: str, title: str) -> None:
    """Change a task's title."""
    mutation = _run_on_board(config, lambda c: c.edit_task(task_id, title))
    _report(mutation, "Renamed task {target}")


@main.command()
@click.argument("task_id")
@click.argument("column_id")
@click.pass_obj
def move(config: TaskboardConfig, task_id: str, column_id: str) -> None:
    """Move a task to another column."""
    mutation = _run_on_board(config, lambda c: c.move_task(task_id, column_id))
    _report(mutation, "Moved task {target} to {result.status}")


@main.command()
@click.argument("task_id")
@click.option("--confirm", "confirmation", default=None, help='Type "delete" to skip the prompt')
@click.pass_obj
def delete(config: TaskboardConfig, task_id: str, confirmation: str | None) -> None:
    """Delete a task after typed confirmation."""
    if confirmation is None:
        confirmation = click.prompt("Type delete to confirm", default="", show_default=False)

    dialog = DeleteConfirmation(task_id=task_id)
    mutation = _run_on_board(config, lambda c: dialog.submit(c, confirmation))
    if dialog.error:
        click.echo(f"Not deleted: {dialog.error}", err=True)
        sys.exit(1)
    _report(mutation, "Deleted task {target}")


@main.command("add-column")
@click.argument("display_title")
@click.option("--color", default=DEFAULT_COLUMN_COLOR, show_default=True)
@click.pass_obj
def add_column(config: TaskboardConfig, display_title: str, color: str) -> None:
    """Add a custom column."""
    mutation = _run_on_board(config, lambda c: c.add_column(display_title, color))
    _report(mutation, "Added column {result.id}")


@main.command("delete-column")
@click.argument("column_id")
@click.pass_obj
def delete_column(config: TaskboardConfig, column_id: str) -> None:
    """Delete a custom column and all of its tasks."""
    mutation = _run_on_board(config, lambda c: c.delete_column(column_id))
    _report(mutation, "Deleted column {target}")


if __name__ == "__main__":
    main()
