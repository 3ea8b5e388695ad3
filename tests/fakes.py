"""Test doubles for the editor host, file system and timers."""

from typing import Callable, Optional

from remember_cursor.models.positions import (
    CursorPosition,
    CursorRange,
    EphemeralState,
)
from remember_cursor.ui.protocols import Viewport

DB_FILE = ".remember-cursor/cursor-positions.json"


def make_state(line=1, ch=2, to_line=None, to_ch=None, scroll=None) -> EphemeralState:
    """Build a state with a cursor; the range collapses to a caret by default."""
    start = CursorPosition(line=line, ch=ch)
    end = CursorPosition(
        line=line if to_line is None else to_line,
        ch=ch if to_ch is None else to_ch,
    )
    return EphemeralState(cursor=CursorRange(start=start, end=end), scroll=scroll)


class MemoryFileSystem:
    """In-memory FileSystem that records writes."""

    def __init__(self, files: Optional[dict] = None):
        self.files: dict[str, str] = dict(files or {})
        self.dirs: set[str] = set()
        self.writes: list[str] = []
        self.fail_writes = False

    def exists(self, path: str) -> bool:
        return path in self.files or path in self.dirs

    def read(self, path: str) -> str:
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.files[path]

    def write(self, path: str, text: str) -> None:
        if self.fail_writes:
            raise PermissionError(path)
        self.files[path] = text
        self.writes.append(path)

    def mkdir(self, path: str) -> None:
        self.dirs.add(path)


class FakeHost:
    """EditorHost that records mutator calls."""

    def __init__(self, active_doc: Optional[str] = "notes/a.md", viewport_id: Optional[str] = "leaf-1"):
        self.active_doc = active_doc
        self.viewport_id = viewport_id
        self.highlighted = False
        self.calls: list[tuple] = []
        self.fail_selection = False

    def active_document_id(self) -> Optional[str]:
        return self.active_doc

    def most_recent_viewport(self) -> Optional[Viewport]:
        if self.viewport_id is None:
            return None
        return Viewport(viewport_id=self.viewport_id, document_id=self.active_doc)

    def is_navigation_highlighted(self) -> bool:
        self.calls.append(("highlight-check", self.highlighted))
        return self.highlighted

    def set_selection(self, start, end) -> None:
        if self.fail_selection:
            raise RuntimeError("editor not ready")
        self.calls.append(("selection", start, end))

    def set_scroll(self, offset) -> None:
        self.calls.append(("scroll", offset))

    @property
    def mutations(self) -> list[tuple]:
        return [call for call in self.calls if call[0] in ("selection", "scroll")]


class RecordingSleep:
    """Stand-in for asyncio.sleep that returns at once.

    `on_sleep` runs during each wait, to simulate events arriving while a
    restore is suspended.
    """

    def __init__(self, host: Optional[FakeHost] = None):
        self.host = host
        self.delays: list[float] = []
        self.on_sleep: Optional[Callable[[int], None]] = None

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        if self.host is not None:
            self.host.calls.append(("sleep", seconds))
        if self.on_sleep is not None:
            self.on_sleep(len(self.delays))
