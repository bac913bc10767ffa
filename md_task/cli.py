"""Command-line interface for md-task."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click  # type: ignore[import-not-found]
from rich.console import Console  # type: ignore[import-not-found]
from rich.markup import escape  # type: ignore[import-not-found]

from md_task import __version__
from md_task.constants import DEV_ENV_VAR, VERBOSE_ENV_VAR
from md_task.core.contracts import ListingEntry, Priority, TaskListing
from md_task.logging_utils import setup_logging
from md_task.utils.config import (
    ConfigDiscovery,
    MdTaskConfig,
    render_config_toml,
    write_default_config,
)
from md_task.workflow import CommandOutcome, TaskWorkflow

console = Console(highlight=False, soft_wrap=True)

logger = logging.getLogger(__name__)

COMMAND_ALIASES = {
    "a": "add",
    "ls": "list",
    "d": "done",
    "rm": "remove",
    "arc": "archive",
}

# A task file that is not valid UTF-8 fails to decode rather than to read.
TASK_FILE_ERRORS = (OSError, UnicodeDecodeError)


@dataclass(frozen=True)
class CliContext:
    """Per-invocation state shared by all subcommands."""

    config: MdTaskConfig
    discovery: ConfigDiscovery
    verbose: bool = False

    def workflow(self) -> TaskWorkflow:
        return TaskWorkflow(self.config)


class AliasedGroup(click.Group):
    """Click group that also resolves short command aliases."""

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        return super().get_command(ctx, COMMAND_ALIASES.get(cmd_name, cmd_name))

    def resolve_command(self, ctx: click.Context, args: list[str]):
        _, cmd, args = super().resolve_command(ctx, args)
        return (cmd.name if cmd else None), cmd, args


def _run_command(action) -> CommandOutcome:
    """Run a workflow action, turning I/O failures into CLI errors."""
    try:
        outcome = action()
    except TASK_FILE_ERRORS as e:
        logger.debug("Task file access failed", exc_info=True)
        raise click.ClickException(f"Failed to access task file: {e}")
    if not outcome.ok:
        raise click.ClickException(outcome.message)
    return outcome


@click.group(cls=AliasedGroup)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    envvar=VERBOSE_ENV_VAR,
    help="Enable verbose output (also enabled by MD_TASK_VERBOSE).",
)
@click.version_option(version=__version__, prog_name="md-task")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """A simple CLI tool to manage tasks in a markdown file."""
    setup_logging(verbose)
    discovery = ConfigDiscovery()
    config = discovery.load()
    ctx.obj = CliContext(config=config, discovery=discovery, verbose=verbose)


@main.command()
@click.argument("task")
@click.option(
    "--priority",
    "-p",
    type=click.Choice(Priority.names()),
    default=None,
    help="Priority level (default: task_management.default_priority).",
)
@click.pass_obj
def add(obj: CliContext, task: str, priority: Optional[str]) -> None:
    """Add a new task."""
    outcome = _run_command(lambda: obj.workflow().add(task, priority))
    console.print(escape(outcome.message))


def _print_entries(entries: list[ListingEntry], prefix: str = "", suffix: str = "") -> None:
    for entry in entries:
        console.print(f"{prefix}{entry.number}: {escape(entry.text)}{suffix}")


def print_listing(listing: TaskListing, show_all: bool) -> None:
    """Render a task listing to the console."""
    if not show_all:
        console.print("--- Tasks ---")
        _print_entries(listing.pending)
        return

    console.print("--- All Tasks ---")
    _print_entries(listing.pending)
    _print_entries(listing.done, prefix="✓", suffix=" [dim](done)[/dim]")

    if listing.archived:
        if listing.pending or listing.done:
            console.print()
        console.print("--- Archived ---")
        _print_entries(listing.archived, prefix="A", suffix=" [dim](archived)[/dim]")

    console.print()
    console.print(
        f"Total: {listing.pending_count} pending, {listing.done_count} done, "
        f"{listing.archived_count} archived"
    )


@main.command(name="list")
@click.option(
    "--all/--pending",
    "show_all",
    default=None,
    help="Show all tasks including completed ones (default: display.show_completed_by_default).",
)
@click.pass_obj
def list_tasks(obj: CliContext, show_all: Optional[bool]) -> None:
    """List tasks."""
    if show_all is None:
        show_all = obj.config.display.show_completed_by_default

    workflow = obj.workflow()
    try:
        listing = workflow.listing()
        if listing is None:
            console.print("No tasks found. Please add a task first.")
            return
        print_listing(listing, show_all)
        if obj.config.task_management.auto_format and workflow.normalize_only():
            logger.debug("File format normalized.")
    except TASK_FILE_ERRORS as e:
        logger.debug("Task file access failed", exc_info=True)
        raise click.ClickException(f"Failed to access task file: {e}")


@main.command()
@click.argument("task_number", type=int)
@click.pass_obj
def done(obj: CliContext, task_number: int) -> None:
    """Mark a task as done."""
    outcome = _run_command(lambda: obj.workflow().done(task_number))
    console.print(outcome.message)


@main.command()
@click.argument("task_number", type=int)
@click.pass_obj
def remove(obj: CliContext, task_number: int) -> None:
    """Remove a task."""
    outcome = _run_command(lambda: obj.workflow().remove(task_number))
    console.print(outcome.message)


@main.command()
@click.argument("task_number", type=int, required=False)
@click.option("--all", "-a", "archive_everything", is_flag=True, help="Archive all completed tasks.")
@click.pass_obj
def archive(obj: CliContext, task_number: Optional[int], archive_everything: bool) -> None:
    """Archive a completed task (or all of them with --all)."""
    if archive_everything:
        outcome = _run_command(lambda: obj.workflow().archive_all())
        console.print(f"All completed tasks have been archived. ({outcome.result.count} moved)")
    elif task_number is not None:
        outcome = _run_command(lambda: obj.workflow().archive(task_number))
        console.print(outcome.message)
    else:
        raise click.ClickException("Please specify either --all or a task number.")


@main.group()
def config() -> None:
    """Configuration management."""


@config.command()
@click.pass_obj
def install(obj: CliContext) -> None:
    """Install global configuration (run once after installation)."""
    path = obj.discovery.global_config_path
    try:
        created = write_default_config(path)
    except OSError as e:
        raise click.ClickException(f"Error installing global config: {e}")
    if created:
        console.print(f"Created global config file: {escape(str(path))}")
    else:
        console.print(f"Global config file already exists: {escape(str(path))}")


@config.command()
@click.option("--force", is_flag=True, help="Overwrite an existing local config file.")
@click.pass_obj
def init(obj: CliContext, force: bool) -> None:
    """Create a local config file in the current directory."""
    path = obj.discovery.local_config_path
    try:
        created = write_default_config(path, overwrite=force)
    except OSError as e:
        raise click.ClickException(f"Error creating config file: {e}")
    if not created:
        raise click.ClickException(
            f"Local config file already exists: {path} (use --force to overwrite)"
        )
    console.print(f"Created local config file: {escape(str(path))}")


@config.command()
@click.pass_obj
def show(obj: CliContext) -> None:
    """Show current configuration."""
    console.print(render_config_toml(obj.config), markup=False, end="")


def _print_search_paths(discovery: ConfigDiscovery, *, status_marks: bool) -> None:
    console.print("Configuration file search order:")
    for idx, path in enumerate(discovery.search_paths(), 1):
        exists = path.exists()
        if status_marks:
            state = "[green]✅ exists[/green]" if exists else "[red]❌ not found[/red]"
        else:
            state = "(exists)" if exists else "(not found)"
        console.print(f"  {idx}. {escape(str(path))} {state}")


def _print_environment(discovery: ConfigDiscovery) -> None:
    console.print(f"  {DEV_ENV_VAR}: {escape(discovery.env.get(DEV_ENV_VAR, 'not set'))}")
    root = discovery.project_root()
    console.print(f"  Project root: {escape(str(root)) if root else 'not detected'}")


@config.command()
@click.pass_obj
def path(obj: CliContext) -> None:
    """Show config file locations."""
    _print_search_paths(obj.discovery, status_marks=False)
    console.print()
    console.print("Environment variables:")
    _print_environment(obj.discovery)


@config.command()
@click.pass_obj
def status(obj: CliContext) -> None:
    """Show comprehensive configuration status."""
    console.print("=== md-task Configuration Status ===")
    _print_search_paths(obj.discovery, status_marks=True)
    console.print()
    console.print("Environment:")
    _print_environment(obj.discovery)

    loaded = obj.discovery.loaded_paths
    console.print()
    console.print("Loaded files:")
    if loaded:
        for loaded_path in loaded:
            console.print(f"  - {escape(str(loaded_path))}")
    else:
        console.print("  (none, using defaults)")

    cfg = obj.config
    console.print()
    console.print("Current active configuration:")
    console.print(f"  Task file: {escape(str(Path(cfg.file_paths.task_file)))}")
    console.print(f"  Default priority: {cfg.task_management.default_priority.value}")
    console.print(f"  Auto format: {str(cfg.task_management.auto_format).lower()}")
    console.print(
        "  Allow incomplete in archive: "
        f"{str(cfg.task_management.allow_incomplete_in_archive).lower()}"
    )
    console.print(
        f"  Show completed by default: {str(cfg.display.show_completed_by_default).lower()}"
    )
    console.print(f"  Working directory: {escape(os.getcwd())}")


if __name__ == "__main__":  # pragma: no cover
    main()
