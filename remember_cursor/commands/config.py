"""Show and change settings with `remember-cursor config <subcommand>`."""

from pathlib import Path

import typer
from rich.table import Table

from ..config.settings import get_settings_path, load_settings, save_settings
from ..exceptions import ConfigurationError
from ..utils.output import console
from ._helpers import ROOT_OPTION, resolve_root

app = typer.Typer(help="Show and change settings")

DESCRIPTIONS = {
    "dbFileName": "Save positions to this file",
    "delayAfterFileOpening": "ms to wait after opening a document before restoring (0-300)",
    "saveTimer": "ms between saves of the position file (min 5000)",
}


@app.command("show")
def show_config(root: Path = ROOT_OPTION):
    """Show the effective settings."""
    root = resolve_root(root)
    settings = load_settings(root)

    table = Table(title=str(get_settings_path(root)))
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_column("Description", style="dim")
    for key, value in settings.to_dict().items():
        table.add_row(key, str(value), DESCRIPTIONS.get(key, ""))
    console.print(table)


@app.command("set")
def set_config(
    key: str = typer.Argument(..., help="Setting name, e.g. saveTimer"),
    value: str = typer.Argument(..., help="New value"),
    root: Path = ROOT_OPTION,
):
    """Change one setting. Out-of-range values are clamped."""
    root = resolve_root(root)
    try:
        settings = load_settings(root).with_value(key, value)
        save_settings(root, settings)
    except ConfigurationError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✅ {key} = {settings.to_dict()[key]}[/green]")
