#!/usr/bin/env python3
"""
Protocols for the editor host.

These protocols define the interface that an editor application must
implement for positions to be recorded and restored in it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..models.positions import CursorPosition


@dataclass(frozen=True)
class Viewport:
    """A visible editing surface and the document it currently shows."""

    viewport_id: str
    document_id: Optional[str]


@runtime_checkable
class ActiveDocumentHost(Protocol):
    """Hosts that can tell which document is being edited."""

    def active_document_id(self) -> Optional[str]:
        """Workspace-relative path of the active document, if any."""
        ...


@runtime_checkable
class EditorHost(ActiveDocumentHost, Protocol):
    """
    Full host interface used when restoring positions.

    Methods that change the editing surface act on the active viewport.
    """

    def most_recent_viewport(self) -> Optional[Viewport]:
        """The most recently used viewport, if any."""
        ...

    def is_navigation_highlighted(self) -> bool:
        """Whether a link jump is currently highlighting a target."""
        ...

    def set_selection(self, start: CursorPosition, end: CursorPosition) -> None:
        """Select from start to end."""
        ...

    def set_scroll(self, offset: float) -> None:
        """Scroll the active viewport to a vertical offset."""
        ...
