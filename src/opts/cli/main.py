"""
CLI for the settings accessor.

Commands:
    opts get KEY - Print a setting
    opts set KEY=VALUE ... - Merge settings into a group (KEY=unset deletes)
    opts show [GROUP] - Show every setting in a group
    opts groups - List stored groups
    opts config - Show current configuration
    opts version - Print version
"""

from __future__ import annotations

from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from opts import __version__
from opts.accessor import render_value
from opts.config import Settings, clear_settings_cache, get_settings
from opts.context import request_scope
from opts.logging import setup_logging
from opts.store import SQLiteSettingsStore
from opts.types import is_array_like

app = typer.Typer(
    name="opts",
    help="Read and update persisted settings groups",
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)


def _load_settings() -> Settings:
    """Load settings, exiting with an error if configuration is invalid."""
    try:
        clear_settings_cache()
        settings = get_settings()
    except ValidationError as e:
        error_console.print(f"[red]Error:[/red] Configuration is invalid.\n{e}")
        raise typer.Exit(1)

    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    return settings


def _open_store(settings: Settings) -> SQLiteSettingsStore:
    settings.ensure_directories()
    store = SQLiteSettingsStore(settings.DB_PATH)
    store.init()
    return store


def _parse_assignments(assignments: list[str]) -> dict[str, str]:
    parsed: dict[str, str] = {}
    for assignment in assignments:
        key, sep, value = assignment.partition("=")
        if not sep or not key.strip():
            error_console.print(
                f"[red]Error:[/red] expected KEY=VALUE, got {escape(repr(assignment))}"
            )
            raise typer.Exit(2)
        parsed[key.strip()] = value
    return parsed


@app.command()
def get(
    key: Annotated[str, typer.Argument(help="Setting name")],
    group: Annotated[
        Optional[str],
        typer.Option("--group", "-g", help="Settings group (default from config)"),
    ] = None,
    no_cache: Annotated[
        bool,
        typer.Option("--no-cache", help="Read the store directly"),
    ] = False,
) -> None:
    """Print a setting's value. Missing settings print an empty line."""
    settings = _load_settings()
    store = _open_store(settings)
    try:
        with request_scope(store, default_group=settings.DEFAULT_GROUP) as accessor:
            value = accessor.get_option(key, group, use_cache=not no_cache)
    finally:
        store.close()

    console.print(render_value(value), markup=False, highlight=False)


@app.command("set")
def set_(
    assignments: Annotated[list[str], typer.Argument(help="KEY=VALUE pairs")],
    group: Annotated[
        Optional[str],
        typer.Option("--group", "-g", help="Settings group (default from config)"),
    ] = None,
) -> None:
    """Merge settings into a group. Use KEY=unset to delete a setting."""
    settings = _load_settings()
    new = _parse_assignments(assignments)
    store = _open_store(settings)
    try:
        with request_scope(
            store,
            default_group=settings.DEFAULT_GROUP,
            invalidate_on_update=settings.INVALIDATE_ON_UPDATE,
        ) as accessor:
            changed = accessor.update_settings(new, group)
    finally:
        store.close()

    target = group or settings.DEFAULT_GROUP
    if changed:
        console.print(f"[green]Updated[/green] {escape(target)}")
    else:
        console.print(f"[dim]No change to[/dim] {escape(target)}")


@app.command()
def show(
    group: Annotated[
        Optional[str],
        typer.Argument(help="Settings group (default from config)"),
    ] = None,
) -> None:
    """Show every setting stored in a group."""
    settings = _load_settings()
    group = group or settings.DEFAULT_GROUP
    store = _open_store(settings)
    try:
        options = store.read_group(group)
    finally:
        store.close()

    if not is_array_like(options):
        console.print(f"[yellow]Group {escape(group)} is empty or missing.[/yellow]")
        return

    table = Table(title=escape(group), show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    for key, value in options.items():
        table.add_row(Text(str(key)), Text(render_value(value)))

    console.print(table)


@app.command()
def groups() -> None:
    """List stored settings groups."""
    settings = _load_settings()
    store = _open_store(settings)
    try:
        names = store.list_groups()
    finally:
        store.close()

    if not names:
        console.print("[dim]No settings groups stored.[/dim]")
        return
    for name in names:
        console.print(name, markup=False, highlight=False)


@app.command()
def config() -> None:
    """Show current configuration."""
    settings = _load_settings()

    table = Table(title="Settings", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for key, value in settings.display().items():
        display_value = escape(str(value)) if value is not None else "[dim]not set[/dim]"
        table.add_row(key, display_value)

    console.print(table)


@app.command()
def version() -> None:
    """Print the version number."""
    console.print(f"opts-accessor version {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
