"""CLI commands."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any, TextIO

import typer
from rich.console import Console
from rich.markup import escape

if TYPE_CHECKING:
    from cli_select.config import Config
    from cli_select.models import SelectDialogKey

app = typer.Typer(
    name="cli-select",
    help="Pick one item from a list with the arrow keys.",
    no_args_is_help=True,
)
console = Console()


def _get_config() -> Config:
    """Lazy import and load config."""
    from cli_select.config import Config

    return Config.load()


def _setup_logging(log_file: Path | None) -> None:
    """Send debug logs to a file; the terminal is busy with the dialog."""
    if log_file is None:
        return
    handler = logging.FileHandler(log_file)
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    logger = logging.getLogger("cli_select")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)


def _read_items_file(path: Path) -> list[str]:
    """Read non-empty lines from a file."""
    return [line for line in path.read_text().splitlines() if line.strip()]


def _run(items: list[str], output: TextIO | None = None, **overrides: Any) -> str:
    """Run a dialog configured from config plus CLI overrides."""
    from cli_select.ui.select import Select, SelectOptions

    options = SelectOptions.from_config(_get_config(), **overrides)
    return Select(items, options, output=output).start()


@app.command()
def pick(
    items: Annotated[list[str] | None, typer.Argument(help="Items to choose from")] = None,
    file: Annotated[
        Path | None, typer.Option("-f", "--file", help="Read items from a file, one per line")
    ] = None,
    pointer: Annotated[str | None, typer.Option("--pointer", help="Selected pointer glyph")] = None,
    unselected_pointer: Annotated[
        str | None, typer.Option("--unselected-pointer", help="Pointer glyph for other items")
    ] = None,
    underline: Annotated[bool, typer.Option("--underline", help="Underline selected item")] = False,
    forward: Annotated[
        bool, typer.Option("--forward", help="Move the selected item forward")
    ] = False,
    up_key: Annotated[list[str] | None, typer.Option("--up-key", help="Extra up key")] = None,
    down_key: Annotated[list[str] | None, typer.Option("--down-key", help="Extra down key")] = None,
    log_file: Annotated[Path | None, typer.Option("--log-file", help="Write debug log here")] = None,
):
    """Show a select dialog and print the chosen item."""
    from cli_select.errors import SelectError

    _setup_logging(log_file)

    all_items = list(items or [])
    if file is not None:
        try:
            all_items.extend(_read_items_file(file))
        except OSError as e:
            console.print(f"[red]Error:[/red] Cannot read {file}: {e}")
            raise typer.Exit(1)

    overrides: dict[str, Any] = {
        "pointer": pointer,
        "unselected_pointer": unselected_pointer,
        "underline_selected_item": True if underline else None,
        "move_selected_item_forward": True if forward else None,
    }

    # The dialog goes to stderr so stdout carries only the choice
    try:
        cfg = _get_config()
        if up_key:
            overrides["extra_up_keys"] = [*cfg.extra_up_keys, *up_key]
        if down_key:
            overrides["extra_down_keys"] = [*cfg.extra_down_keys, *down_key]
        choice = _run(all_items, output=sys.stderr, **overrides)
    except SelectError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        raise typer.Exit(130)

    typer.echo(choice)


@app.command()
def demo(
    count: Annotated[int, typer.Option("-n", "--count", help="Number of items")] = 5,
    log_file: Annotated[Path | None, typer.Option("--log-file", help="Write debug log here")] = None,
):
    """Pick from generated items and report every selection change."""
    from cli_select.errors import SelectError

    _setup_logging(log_file)

    changes: list[tuple[SelectDialogKey, str]] = []

    def record(direction: SelectDialogKey, item: str) -> None:
        changes.append((direction, item))

    items = [f"Item {i}" for i in range(1, count + 1)]
    console.print("[bold]Pick an item[/bold] [dim](↑↓ move · enter select)[/dim]")
    try:
        choice = _run(items, on_change=record)
    except SelectError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        raise typer.Exit(130)

    for direction, item in changes:
        console.print(f"[dim]{direction.value:>4}[/dim] → {escape(item)}")
    console.print(f"[green]✓[/green] Selected: {escape(choice)}")


@app.command(name="config")
def show_config(
    set_: Annotated[
        list[str] | None, typer.Option("--set", help="Save a setting as KEY=VALUE")
    ] = None,
):
    """Show the effective configuration, optionally changing settings first."""
    from cli_select.config import SETTINGS
    from cli_select.errors import ConfigError

    try:
        cfg = _get_config()
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    for assignment in set_ or []:
        key, sep, value = assignment.partition("=")
        if not sep:
            console.print(f"[red]Error:[/red] Invalid setting '{escape(assignment)}'. Use KEY=VALUE")
            raise typer.Exit(1)
        try:
            cfg.set(key.strip(), value)
        except KeyError:
            console.print(f"[red]Error:[/red] Unknown setting '{escape(key)}'")
            raise typer.Exit(1)
        except ConfigError as e:
            console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise typer.Exit(1)

    console.print(f"[dim]{cfg.path}[/dim]")
    for setting in SETTINGS.values():
        value = getattr(cfg, setting.name)
        if setting.toggle:
            mark = "[green]✓[/green]" if value else "[dim]·[/dim]"
            console.print(f"{mark} {setting.name} [dim]{setting.description}[/dim]")
        else:
            console.print(
                f"  {setting.name} = {escape(repr(value))} [dim]{setting.description}[/dim]"
            )
