#!/usr/bin/env python3
"""
Textual editor that remembers where you were in every document.

A directory tree of the workspace on the left, one editing viewport on the
right. Positions are recorded as the selection moves and restored when a
document is opened again.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Iterable, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import DirectoryTree, Footer, Input, TextArea
from textual.widgets.text_area import Selection

from ..config.constants import NAVIGATION_HIGHLIGHT_SECONDS, PRIVATE_DIR_NAME
from ..config.settings import Settings
from ..models.positions import CursorPosition
from ..services.events import (
    DELETE,
    DOCUMENT_OPEN,
    RENAME,
    SELECTION_CHANGED,
    SHUTDOWN,
    EventDispatcher,
)
from ..services.filesystem import LocalFileSystem
from ..services.lifecycle import LifecycleCoordinator
from ..services.position_store import PositionStore
from .protocols import Viewport

logger = logging.getLogger(__name__)

EDITOR_VIEWPORT_ID = "editor"
FLASHING_CLASS = "-flashing"


class WorkspaceTree(DirectoryTree):
    """Directory tree that hides dot-files and the private data directory."""

    def filter_paths(self, paths: Iterable[Path]) -> Iterable[Path]:
        return [path for path in paths if not path.name.startswith(".")]


def find_heading_line(text: str, heading: str) -> Optional[int]:
    """0-based line of a markdown heading whose title matches heading."""
    wanted = heading.strip().lower()
    for number, line in enumerate(text.splitlines()):
        stripped = line.lstrip()
        if stripped.startswith("#") and stripped.lstrip("#").strip().lower() == wanted:
            return number
    return None


class CursorEditorApp(App[None]):
    """Editor host that records and restores positions per document."""

    CSS = """
    #tree {
        width: 30%;
    }
    #editor.-flashing {
        background: $warning 20%;
    }
    #rename-input {
        display: none;
        dock: bottom;
    }
    #rename-input.-visible {
        display: block;
    }
    """

    BINDINGS = [
        Binding("ctrl+s", "save", "Save"),
        Binding("ctrl+r", "rename_document", "Rename"),
        Binding("ctrl+d", "delete_document", "Delete"),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, root: Path, settings: Settings, initial: Optional[str] = None):
        super().__init__()
        self.workspace_root = Path(root).resolve()
        self.user_settings = settings
        self.dispatcher = EventDispatcher()
        self.store = PositionStore(LocalFileSystem(self.workspace_root), settings.db_file_name)
        self.coordinator = LifecycleCoordinator(self, self.store, settings)
        self.coordinator.register(self.dispatcher)

        self._initial = initial
        self._active_doc: Optional[str] = None
        self._settling_task: Optional[asyncio.Future] = None
        self._delete_armed = False

    def compose(self) -> ComposeResult:
        with Horizontal():
            yield WorkspaceTree(str(self.workspace_root), id="tree")
            yield TextArea(id="editor")
        yield Input(placeholder="New path", id="rename-input")
        yield Footer()

    def on_mount(self) -> None:
        if self._initial:
            doc_id, _, heading = self._initial.partition("#")
            self._load_document(doc_id, heading or None)
        self._track_restore(self.coordinator.start())

    # ------------------------------------------------------------------
    # EditorHost
    # ------------------------------------------------------------------

    @property
    def editor(self) -> TextArea:
        return self.query_one("#editor", TextArea)

    def active_document_id(self) -> Optional[str]:
        return self._active_doc

    def most_recent_viewport(self) -> Optional[Viewport]:
        return Viewport(viewport_id=EDITOR_VIEWPORT_ID, document_id=self._active_doc)

    def is_navigation_highlighted(self) -> bool:
        return self.editor.has_class(FLASHING_CLASS)

    def set_selection(self, start: CursorPosition, end: CursorPosition) -> None:
        self.editor.selection = Selection(start.as_location(), end.as_location())

    def set_scroll(self, offset: float) -> None:
        self.editor.scroll_to(y=offset, animate=False)

    # ------------------------------------------------------------------
    # Opening documents
    # ------------------------------------------------------------------

    def doc_id_for(self, path: Path) -> str:
        return path.resolve().relative_to(self.workspace_root).as_posix()

    def open_document(self, doc_id: str, heading: Optional[str] = None) -> None:
        """Show doc_id in the viewport and restore its position."""
        if doc_id == self._active_doc and heading is None:
            # Already showing it; the restorer treats this as a duplicate open
            self._track_restore(*self.dispatcher.emit(DOCUMENT_OPEN))
            return
        if self._load_document(doc_id, heading):
            self._track_restore(*self.dispatcher.emit(DOCUMENT_OPEN))

    def _load_document(self, doc_id: str, heading: Optional[str]) -> bool:
        path = self.workspace_root / doc_id
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Can't open {doc_id}: {e}")
            self.notify(f"Can't open {doc_id}", severity="error")
            return False

        self.editor.load_text(text)
        self._active_doc = doc_id
        self.sub_title = doc_id

        if heading:
            self._jump_to_heading(text, heading)
        return True

    def _jump_to_heading(self, text: str, heading: str) -> None:
        line = find_heading_line(text, heading)
        if line is None:
            logger.debug(f"Heading {heading!r} not found in {self._active_doc}")
            return
        editor = self.editor
        editor.selection = Selection.cursor((line, 0))
        editor.add_class(FLASHING_CLASS)
        self.set_timer(NAVIGATION_HIGHLIGHT_SECONDS, lambda: editor.remove_class(FLASHING_CLASS))

    def _track_restore(self, *results: object) -> None:
        """Ignore selection changes until the pending restore has finished.

        Loading text resets the selection, and that reset must not overwrite
        the stored position before it has been restored.
        """
        for result in results:
            if isinstance(result, asyncio.Future) and not result.done():
                self._settling_task = result
                result.add_done_callback(self._end_settling)

    def _end_settling(self, task: asyncio.Future) -> None:
        if self._settling_task is task:
            self._settling_task = None

    def on_directory_tree_file_selected(self, event: DirectoryTree.FileSelected) -> None:
        event.stop()
        self.open_document(self.doc_id_for(event.path))

    def on_text_area_selection_changed(self, event: TextArea.SelectionChanged) -> None:
        # Dropped for the whole pending restore, even one that ends up skipped.
        # A move made in that window is lost until the cursor moves again.
        if self._settling_task is not None:
            return
        self.dispatcher.emit(
            SELECTION_CHANGED,
            event.selection.start,
            event.selection.end,
            event.text_area.scroll_offset.y,
        )

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def action_save(self) -> None:
        if not self._active_doc:
            return
        try:
            (self.workspace_root / self._active_doc).write_text(self.editor.text, encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to save {self._active_doc}: {e}")
            self.notify(f"Failed to save {self._active_doc}", severity="error")
            return
        self.notify(f"Saved {self._active_doc}")

    def action_rename_document(self) -> None:
        if not self._active_doc:
            return
        rename_input = self.query_one("#rename-input", Input)
        rename_input.value = self._active_doc
        rename_input.add_class("-visible")
        rename_input.focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.input.remove_class("-visible")
        new_id = event.value.strip().strip("/")
        if self._active_doc and new_id and new_id != self._active_doc:
            self.rename_document(self._active_doc, new_id)
        self.editor.focus()

    def rename_document(self, old_id: str, new_id: str) -> bool:
        """Move a document on disk and carry its position along."""
        if new_id.split("/", 1)[0] == PRIVATE_DIR_NAME:
            self.notify("Can't move documents into the data directory", severity="error")
            return False
        source = self.workspace_root / old_id
        target = self.workspace_root / new_id
        if target.exists():
            self.notify(f"{new_id} already exists", severity="error")
            return False
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            source.rename(target)
        except OSError as e:
            logger.error(f"Failed to rename {old_id} to {new_id}: {e}")
            self.notify(f"Failed to rename {old_id}", severity="error")
            return False

        self.dispatcher.emit(RENAME, old_id, new_id)
        if self._active_doc == old_id:
            self._active_doc = new_id
            self.sub_title = new_id
        self.query_one("#tree", WorkspaceTree).reload()
        return True

    def action_delete_document(self) -> None:
        if not self._active_doc:
            return
        if not self._delete_armed:
            self._delete_armed = True
            self.notify(f"Press ctrl+d again to delete {self._active_doc}")
            self.set_timer(3.0, self._disarm_delete)
            return
        self._delete_armed = False
        self.delete_document(self._active_doc)

    def _disarm_delete(self) -> None:
        self._delete_armed = False

    def delete_document(self, doc_id: str) -> bool:
        """Delete a document from disk and forget its position."""
        try:
            (self.workspace_root / doc_id).unlink()
        except OSError as e:
            logger.error(f"Failed to delete {doc_id}: {e}")
            self.notify(f"Failed to delete {doc_id}", severity="error")
            return False

        self.dispatcher.emit(DELETE, doc_id)
        if self._active_doc == doc_id:
            self._active_doc = None
            self.sub_title = ""
            self.editor.load_text("")
        self.query_one("#tree", WorkspaceTree).reload()
        return True

    async def action_quit(self) -> None:
        await self.dispatcher.emit_async(SHUTDOWN)
        self.exit()
