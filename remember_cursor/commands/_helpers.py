"""Shared helpers for CLI commands."""

from pathlib import Path

import typer

from ..config.constants import ROOT_ENV_VAR
from ..config.settings import Settings, load_settings
from ..services.filesystem import LocalFileSystem
from ..services.position_store import PositionStore
from ..utils.output import console

ROOT_OPTION = typer.Option(
    Path("."),
    "--root",
    "-r",
    envvar=ROOT_ENV_VAR,
    help="Workspace root the document paths are relative to",
)


def resolve_root(root: Path) -> Path:
    root = root.expanduser().resolve()
    if not root.is_dir():
        console.print(f"[red]Error: {root} is not a directory[/red]")
        raise typer.Exit(1)
    return root


def open_store(root: Path) -> tuple[Settings, PositionStore]:
    """Load the settings and position database of a workspace."""
    settings = load_settings(root)
    store = PositionStore(LocalFileSystem(root), settings.db_file_name)
    store.load()
    return settings, store
