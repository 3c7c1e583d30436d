"""CLI commands."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.markup import escape

if TYPE_CHECKING:
    from qgo.config import Config
    from qgo.models import Option
    from qgo.ui.render import Renderer

app = typer.Typer(
    name="qgo",
    help="Arrow-key pickers for the terminal.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

EXIT_CANCELLED = 1
EXIT_FAILURE = 2


def _get_config() -> Config:
    """Lazy import and load config."""
    from qgo.config import Config

    return Config.load()


def _build_renderer(cfg: Config) -> Renderer:
    """Frames go to stderr so stdout only carries the chosen values."""
    from qgo.ui.render import Renderer

    return Renderer(sys.stderr, cursor_marker=cfg.cursor_marker, show_hints=cfg.show_hints)


def _load_options_file(path: Path) -> list[Option]:
    """Load a JSON list of {"value", "label"} objects."""
    from qgo.models import Option

    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise ValueError(f"Cannot read options from {path}: {e}") from e
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON list")

    options = []
    for entry in data:
        if not isinstance(entry, dict) or "value" not in entry:
            raise ValueError(f"Invalid option entry in {path}: {entry!r}")
        value = str(entry["value"])
        options.append(Option(value, str(entry.get("label", value))))
    return options


def _collect_options(raw: list[str] | None, from_file: Path | None) -> list[Option]:
    from qgo.models import parse_option

    if from_file is not None:
        return _load_options_file(from_file)
    return [parse_option(r) for r in raw or []]


def _run_picker(multi: bool, prompt: str, raw: list[str] | None, from_file: Path | None):
    from qgo.errors import SelectionCancelled, SelectionError
    from qgo.ui import multi_select, select

    try:
        options = _collect_options(raw, from_file)
        renderer = _build_renderer(_get_config())
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_FAILURE)

    picker = multi_select if multi else select
    try:
        return picker(prompt, options, renderer=renderer)
    except SelectionCancelled:
        err_console.print("[yellow]Selection cancelled[/yellow]")
        raise typer.Exit(EXIT_CANCELLED)
    except SelectionError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_FAILURE)


OptionsArg = Annotated[
    list[str] | None,
    typer.Argument(help="Options as VALUE=LABEL (bare VALUE uses itself as label)"),
]
FromFileOpt = Annotated[
    Path | None,
    typer.Option("--from-file", "-f", help="JSON list of {value, label} objects"),
]


@app.callback()
def main(
    debug: Annotated[bool, typer.Option("--debug", help="Log debug output to stderr")] = False,
):
    """Arrow-key pickers for the terminal."""
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )


@app.command(name="select")
def select_cmd(
    prompt: Annotated[str, typer.Argument(help="Prompt shown above the options")],
    options: OptionsArg = None,
    from_file: FromFileOpt = None,
):
    """Pick one option and print its value."""
    value = _run_picker(False, prompt, options, from_file)
    console.print(value, markup=False, highlight=False, soft_wrap=True)


@app.command(name="multi-select")
def multi_select_cmd(
    prompt: Annotated[str, typer.Argument(help="Prompt shown above the options")],
    options: OptionsArg = None,
    from_file: FromFileOpt = None,
):
    """Toggle options with space and print each chosen value on its own line."""
    for value in _run_picker(True, prompt, options, from_file):
        console.print(value, markup=False, highlight=False, soft_wrap=True)


@app.command()
def config(
    key: Annotated[str | None, typer.Argument(help="Setting to show or change")] = None,
    value: Annotated[str | None, typer.Argument(help="New value")] = None,
):
    """Show settings, or change one."""
    from qgo.config import ConfigMeta

    cfg = _get_config()

    if key is None:
        for name, desc, current in cfg.get_settings():
            console.print(f"[cyan]{name}[/cyan] = {escape(repr(current))}  [dim]{desc}[/dim]")
        return

    if key not in ConfigMeta.SETTINGS:
        err_console.print(f"[red]Error:[/red] Unknown setting '{escape(key)}'")
        raise typer.Exit(EXIT_FAILURE)

    if value is None:
        console.print(repr(getattr(cfg, key)), markup=False, highlight=False)
        return

    try:
        cfg.set(key, value)
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_FAILURE)
    console.print(f"[green]✓[/green] {key} = {escape(repr(getattr(cfg, key)))}")
