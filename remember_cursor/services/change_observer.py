"""
Turn selection-change notifications into position observations.

Runs on every selection change in the editor, so it does no I/O: it
converts coordinates, builds an EphemeralState and hands it to the
recorder.
"""

from __future__ import annotations

import bisect
import logging
from typing import Optional

from ..models.positions import CursorPosition, CursorRange, EphemeralState
from ..ui.protocols import ActiveDocumentHost
from .recorder import Recorder

logger = logging.getLogger(__name__)

Location = tuple[int, int]


class LineIndex:
    """Maps character offsets to 0-based (line, column) pairs."""

    def __init__(self, text: str):
        self.length = len(text)
        self.line_starts = [0]
        for i, char in enumerate(text):
            if char == "\n":
                self.line_starts.append(i + 1)

    @property
    def line_count(self) -> int:
        return len(self.line_starts)

    def position_at(self, offset: int) -> CursorPosition:
        """Position of a character offset, clamped to the document."""
        offset = min(max(offset, 0), self.length)
        line = bisect.bisect_right(self.line_starts, offset) - 1
        return CursorPosition(line=line, ch=offset - self.line_starts[line])


class ChangeObserver:
    """Feeds selection changes of the active document to the recorder."""

    def __init__(self, host: ActiveDocumentHost, recorder: Recorder):
        self.host = host
        self.recorder = recorder

    def on_selection_offsets(
        self,
        from_offset: int,
        to_offset: int,
        lines: LineIndex,
        scroll: Optional[float],
    ) -> bool:
        """Handle a selection reported as character offsets."""
        start, end = sorted((from_offset, to_offset))
        return self._forward(lines.position_at(start), lines.position_at(end), scroll)

    def on_selection_locations(
        self,
        anchor: Location,
        head: Location,
        scroll: Optional[float],
    ) -> bool:
        """Handle a selection reported as (line, column) locations.

        Anchor and head may come in either order; the stored range always
        runs forwards.
        """
        start, end = sorted((tuple(anchor), tuple(head)))
        return self._forward(CursorPosition(*start), CursorPosition(*end), scroll)

    def _forward(
        self, start: CursorPosition, end: CursorPosition, scroll: Optional[float]
    ) -> bool:
        doc_id = self.host.active_document_id()
        if not doc_id:
            return False
        candidate = EphemeralState(cursor=CursorRange(start=start, end=end), scroll=scroll)
        return self.recorder.observe(doc_id, candidate)
