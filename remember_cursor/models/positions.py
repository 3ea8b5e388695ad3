"""Cursor and scroll state recorded per document.

The serialized form is the one stored in cursor-positions.json::

    {"notes/todo.md": {"cursor": {"from": {"line": 3, "ch": 0},
                                  "to": {"line": 3, "ch": 12}},
                       "scroll": 240}}

Absent fields are omitted, never written as null.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CursorPosition:
    """A 0-based (line, column) location in a document."""

    line: int
    ch: int

    @classmethod
    def from_dict(cls, data: Any) -> CursorPosition:
        if not isinstance(data, dict):
            raise ValueError(f"position must be an object, got {type(data).__name__}")
        line, ch = data.get("line"), data.get("ch")
        for name, value in (("line", line), ("ch", ch)):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"position {name} must be a non-negative integer: {value!r}")
        return cls(line=line, ch=ch)

    def to_dict(self) -> dict[str, int]:
        return {"line": self.line, "ch": self.ch}

    def as_location(self) -> tuple[int, int]:
        return (self.line, self.ch)


@dataclass(frozen=True)
class CursorRange:
    """A selection, from <= to."""

    start: CursorPosition
    end: CursorPosition

    @classmethod
    def from_dict(cls, data: Any) -> CursorRange:
        if not isinstance(data, dict):
            raise ValueError(f"cursor must be an object, got {type(data).__name__}")
        return cls(
            start=CursorPosition.from_dict(data.get("from")),
            end=CursorPosition.from_dict(data.get("to")),
        )

    def to_dict(self) -> dict[str, dict[str, int]]:
        return {"from": self.start.to_dict(), "to": self.end.to_dict()}


@dataclass(frozen=True)
class EphemeralState:
    """Selection and scroll offset observed for a document.

    ``None`` means "not tracked for this observation", which is distinct
    from a zero value. Instances are never mutated; each observation
    creates a new one.
    """

    cursor: Optional[CursorRange] = None
    scroll: Optional[float] = None

    @property
    def has_valid_scroll(self) -> bool:
        """True when scroll is a real number (not missing, not NaN)."""
        return _is_number(self.scroll) and not math.isnan(self.scroll)

    @classmethod
    def from_dict(cls, data: Any, doc_id: str = "") -> EphemeralState:
        """Parse a stored state.

        Each field is parsed independently: a malformed cursor doesn't
        prevent the scroll from being used, and vice versa.
        """
        if not isinstance(data, dict):
            logger.warning(f"Ignoring non-object state for {doc_id!r}")
            return cls()

        cursor = None
        if data.get("cursor") is not None:
            try:
                cursor = CursorRange.from_dict(data["cursor"])
            except ValueError as e:
                logger.warning(f"Dropping malformed cursor for {doc_id!r}: {e}")

        scroll = data.get("scroll")
        if scroll is not None and not (_is_number(scroll) and math.isfinite(scroll)):
            logger.warning(f"Dropping malformed scroll for {doc_id!r}: {scroll!r}")
            scroll = None

        return cls(cursor=cursor, scroll=scroll)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.cursor is not None:
            data["cursor"] = self.cursor.to_dict()
        if _is_number(self.scroll) and math.isfinite(self.scroll):
            data["scroll"] = self.scroll
        return data


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def states_equal(a: EphemeralState, b: EphemeralState) -> bool:
    """Decide whether two observations are the same position.

    A scroll offset of 0 counts as "no scroll recorded", so returning to
    the top of a document never by itself causes a re-save.
    """
    if (a.cursor is None) != (b.cursor is None):
        return False

    if a.cursor is not None and b.cursor is not None:
        if a.cursor.start.ch != b.cursor.start.ch:
            return False
        if a.cursor.start.line != b.cursor.start.line:
            return False
        if a.cursor.end.ch != b.cursor.end.ch:
            return False
        if a.cursor.end.line != b.cursor.end.line:
            return False

    if bool(a.scroll) != bool(b.scroll):
        return False

    if a.scroll and a.scroll != b.scroll:
        return False

    return True
