"""Remember which viewports have already had their position restored."""

from __future__ import annotations

from typing import Optional


class RecentViewportCache:
    """Tracks, per viewport, the document it was last restored for.

    A viewport that is opened again on the document it already shows is a
    duplicate open and must not be restored twice. Showing a different
    document in the viewport starts a new navigation, so coming back to the
    first document later restores it again.
    """

    def __init__(self) -> None:
        self._shown: dict[str, str] = {}

    def __contains__(self, pair: tuple[str, str]) -> bool:
        viewport_id, doc_id = pair
        return self._shown.get(viewport_id) == doc_id

    def __len__(self) -> int:
        return len(self._shown)

    def mark(self, viewport_id: str, doc_id: str) -> bool:
        """Record that viewport_id now shows doc_id.

        Returns:
            False if the pair was already recorded (a duplicate open).
        """
        if (viewport_id, doc_id) in self:
            return False
        self._shown[viewport_id] = doc_id
        return True

    def unmark(self, viewport_id: str, doc_id: str) -> None:
        """Forget a pair whose restore never happened."""
        if (viewport_id, doc_id) in self:
            del self._shown[viewport_id]

    def document_for(self, viewport_id: str) -> Optional[str]:
        return self._shown.get(viewport_id)

    def rename_document(self, old_id: str, new_id: str) -> None:
        """Keep entries pointing at a document across a rename."""
        for viewport_id, doc_id in list(self._shown.items()):
            if doc_id == old_id:
                self._shown[viewport_id] = new_id
