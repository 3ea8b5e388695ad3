"""
Inspect and maintain stored positions without opening the editor.

All commands live under `remember-cursor positions <subcommand>`.
"""

from pathlib import Path

import typer
from rich.table import Table

from ..exceptions import PositionStoreWriteError
from ..models.positions import EphemeralState
from ..services.position_store import PositionStore
from ..utils.output import console, print_json
from ._helpers import ROOT_OPTION, open_store, resolve_root

app = typer.Typer(help="Inspect and maintain stored positions")


def format_cursor(state: EphemeralState) -> str:
    """Human-readable, 1-based cursor description."""
    if state.cursor is None:
        return "-"
    start, end = state.cursor.start, state.cursor.end
    text = f"{start.line + 1}:{start.ch + 1}"
    if end != start:
        text += f" → {end.line + 1}:{end.ch + 1}"
    return text


def format_scroll(state: EphemeralState) -> str:
    if state.scroll is None:
        return "-"
    return f"{state.scroll:g}"


def _flush(store: PositionStore) -> None:
    try:
        store.flush()
    except PositionStoreWriteError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command("list")
def list_positions(root: Path = ROOT_OPTION):
    """List every document with a stored position."""
    root = resolve_root(root)
    _, store = open_store(root)

    if not store.working:
        console.print("[yellow]No positions stored[/yellow]")
        return

    table = Table(title=f"Positions in {root}")
    table.add_column("Document", style="cyan")
    table.add_column("Cursor")
    table.add_column("Scroll", justify="right")
    for doc_id in sorted(store.working):
        state = store.working[doc_id]
        table.add_row(doc_id, format_cursor(state), format_scroll(state))
    console.print(table)


@app.command("show")
def show_position(
    document: str = typer.Argument(..., help="Document path relative to the root"),
    root: Path = ROOT_OPTION,
):
    """Print the stored state of one document as JSON."""
    root = resolve_root(root)
    _, store = open_store(root)

    state = store.get(document)
    if state is None:
        console.print(f"[red]Error: No position stored for {document}[/red]")
        raise typer.Exit(1)
    print_json(state.to_dict())


@app.command("forget")
def forget_position(
    document: str = typer.Argument(..., help="Document path relative to the root"),
    root: Path = ROOT_OPTION,
):
    """Remove the stored position of a document."""
    root = resolve_root(root)
    _, store = open_store(root)

    if not store.delete(document):
        console.print(f"[yellow]No position stored for {document}[/yellow]")
        return
    _flush(store)
    console.print(f"[green]✅ Forgot position for {document}[/green]")


@app.command("rename")
def rename_position(
    old: str = typer.Argument(..., help="Previous document path"),
    new: str = typer.Argument(..., help="New document path"),
    root: Path = ROOT_OPTION,
):
    """Carry a position over after a document was moved outside the editor."""
    root = resolve_root(root)
    _, store = open_store(root)

    if not store.rename(old, new):
        console.print(f"[yellow]No position stored for {old}[/yellow]")
        return
    _flush(store)
    console.print(f"[green]✅ Moved position {old} → {new}[/green]")


@app.command("prune")
def prune_positions(
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Only show what would be removed"),
    root: Path = ROOT_OPTION,
):
    """Remove positions of documents that no longer exist."""
    root = resolve_root(root)
    _, store = open_store(root)

    missing = sorted(doc_id for doc_id in store.working if not (root / doc_id).is_file())
    if not missing:
        console.print("[green]Nothing to prune[/green]")
        return

    for doc_id in missing:
        console.print(f"  [dim]•[/dim] {doc_id}")
    if dry_run:
        console.print(f"[yellow]Would remove {len(missing)} position(s)[/yellow]")
        return

    for doc_id in missing:
        store.delete(doc_id)
    _flush(store)
    console.print(f"[green]✅ Removed {len(missing)} position(s)[/green]")
