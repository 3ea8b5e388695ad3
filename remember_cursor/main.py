#!/usr/bin/env python3
"""
Main CLI entry point for remember-cursor
"""

from pathlib import Path
from typing import Optional

import typer

from remember_cursor import __version__
from remember_cursor.commands._helpers import ROOT_OPTION, resolve_root
from remember_cursor.commands.config import app as config_app
from remember_cursor.commands.positions import app as positions_app
from remember_cursor.config.constants import LOG_FILE_NAME
from remember_cursor.config.settings import load_settings
from remember_cursor.utils.logging import setup_logging
from remember_cursor.utils.output import console

app = typer.Typer(
    help="Remember cursor and scroll positions per document and restore them on reopen.",
    no_args_is_help=True,
)
app.add_typer(positions_app, name="positions")
app.add_typer(config_app, name="config")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    remember-cursor - per-document cursor and scroll memory

    [bold]Examples:[/bold]

    Edit the current directory:
        [cyan]remember-cursor edit[/cyan]

    Jump to a heading (no position restore):
        [cyan]remember-cursor edit --open "notes/todo.md#Next week"[/cyan]

    See what is stored:
        [cyan]remember-cursor positions list[/cyan]
    """
    ctx.obj = {"verbose": verbose}
    setup_logging(verbose=verbose)


@app.command()
def version():
    """Show remember-cursor version"""
    typer.echo(f"remember-cursor version {__version__}")


@app.command()
def edit(
    ctx: typer.Context,
    open_path: Optional[str] = typer.Option(
        None, "--open", "-o", help="Document to open, optionally with #heading"
    ),
    root: Path = ROOT_OPTION,
):
    """Open the editor on a workspace directory."""
    from remember_cursor.ui.editor_app import CursorEditorApp

    root = resolve_root(root)
    if open_path and not (root / open_path.partition("#")[0]).is_file():
        console.print(f"[red]Error: {open_path} not found in {root}[/red]")
        raise typer.Exit(1)

    # The terminal belongs to the editor while it runs
    setup_logging(verbose=(ctx.obj or {}).get("verbose", False), log_file=root / LOG_FILE_NAME)
    settings = load_settings(root)
    editor = CursorEditorApp(root, settings, initial=open_path)
    try:
        editor.run()
    finally:
        # Quitting flushes already; this covers exits that bypass the quit action
        editor.coordinator.flush_now()


def run():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    run()
