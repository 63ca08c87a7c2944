"""Command-line front end for the task board."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path

from loguru import logger
from rich.console import Console
from rich.table import Table

from .config import BoardConfig, parse_port
from .errors import ConfigError
from .models import Task
from .storage import FileStore
from .store import TaskStore
from .utils.logging import setup_logger


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="task-board", description="Add, list and remove tasks"
    )
    parser.add_argument(
        "--storage-dir",
        type=Path,
        default=None,
        help="Directory holding the persisted task list",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Minimum log level (DEBUG, INFO, WARNING, ...)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="Show all tasks")

    add_parser = subparsers.add_parser("add", help="Add a task")
    add_parser.add_argument("title", help="Task title")

    delete_parser = subparsers.add_parser("delete", help="Delete a task by id")
    delete_parser.add_argument("task_id", type=int, help="Id of the task to delete")

    serve_parser = subparsers.add_parser("serve", help="Run the web task board")
    serve_parser.add_argument("--host", default=None, help="Host to bind to")
    serve_parser.add_argument("--port", default=None, help="Port to bind to")

    return parser.parse_args(argv)


def render_tasks(tasks: Sequence[Task], console: Console) -> None:
    """Print tasks as a table."""
    if not tasks:
        console.print("[dim]No tasks yet.[/dim]")
        return
    table = Table(title="Task Board")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Title")
    for task in tasks:
        table.add_row(str(task.id), task.title)
    console.print(table)


def build_config(args: argparse.Namespace) -> BoardConfig:
    """Merge command-line flags over the environment config."""
    config = BoardConfig.from_env()
    if args.storage_dir is not None:
        config.storage_dir = args.storage_dir
    if args.log_level is not None:
        config.log_level = args.log_level.upper()
    if args.command == "serve":
        if args.host is not None:
            config.host = args.host
        if args.port is not None:
            config.port = parse_port(args.port)
    return config


def main(argv: Sequence[str] | None = None, console: Console | None = None) -> int:
    args = parse_args(argv)
    console = console or Console()

    try:
        config = build_config(args)
    except ConfigError as exc:
        console.print(f"[red]{exc}[/red]")
        return 2

    setup_logger(
        level=config.log_level, log_file=config.log_file, use_rich=config.use_rich
    )
    store = TaskStore(FileStore(config.storage_dir), key=config.storage_key)
    store.load()

    if args.command == "list":
        render_tasks(store.tasks, console)
    elif args.command == "add":
        result = store.add(args.title)
        console.print(f"Added task {result.task.id}: {result.task.title}")
        render_tasks(result.tasks, console)
    elif args.command == "delete":
        existed = store.get(args.task_id) is not None
        tasks = store.delete(args.task_id)
        if existed:
            console.print(f"Deleted task {args.task_id}")
        else:
            console.print(f"[yellow]No task with id {args.task_id}[/yellow]")
        render_tasks(tasks, console)
    elif args.command == "serve":
        from .server import TaskBoardServer

        server = TaskBoardServer(store, host=config.host, port=config.port)
        try:
            server.run()
        except KeyboardInterrupt:
            logger.info("Shutting down...")
    return 0
