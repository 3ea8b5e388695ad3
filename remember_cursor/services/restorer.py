"""
Restore a stored position when a document is opened.

Restoring is best-effort and timing-sensitive. The host needs a moment
after opening a document before selection and scroll changes stick, and a
link that jumps to a heading drives the position itself, so the restorer:

1. skips viewports that were already restored for the same document
2. waits ``delayAfterFileOpening`` ms for the host to settle
3. gives up if a navigation highlight is showing
4. waits another 10 ms, re-checks that the same document is active and
   still not highlighted, then applies cursor and scroll

Other events are processed during the waits, which is why the checks are
repeated right before anything is applied.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ..config.constants import INDICATOR_SETTLE_DELAY_MS
from ..config.settings import Settings
from ..models.positions import EphemeralState
from ..ui.protocols import EditorHost
from .position_store import PositionStore
from .viewport_cache import RecentViewportCache

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class Restorer:
    """Applies stored positions to newly opened documents."""

    def __init__(
        self,
        host: EditorHost,
        store: PositionStore,
        settings: Settings,
        cache: RecentViewportCache,
        sleep: Sleep = asyncio.sleep,
    ):
        self.host = host
        self.store = store
        self.settings = settings
        self.cache = cache
        self._sleep = sleep

    async def restore_for_active_viewport(self) -> bool:
        """Restore the active document's position in its viewport.

        A viewport/document pair stays marked as restored unless the restore
        is cancelled or the document is switched away during the waits; a
        navigation highlight still counts as handled.

        Returns:
            True if a stored state was applied.
        """
        doc_id = self.host.active_document_id()
        if not doc_id:
            return False

        viewport = self.host.most_recent_viewport()
        if viewport is None:
            return False
        pair = (viewport.viewport_id, viewport.document_id or doc_id)
        if not self.cache.mark(*pair):
            logger.debug(f"Already restored {doc_id} in {viewport.viewport_id}")
            return False

        state = self.store.get(doc_id)
        if state is None:
            return False

        try:
            applied = await self._restore_after_settling(doc_id, state)
        except asyncio.CancelledError:
            self.cache.unmark(*pair)
            raise
        if applied is None:
            self.cache.unmark(*pair)
            return False
        return applied

    async def _restore_after_settling(self, doc_id: str, state: EphemeralState) -> Optional[bool]:
        """Wait out the settle delays and apply state.

        Returns None when another document became active in the meantime.
        """
        await self._sleep(self.settings.delay_after_file_opening_seconds)

        # A link to a heading is already positioning the document
        if self.host.is_navigation_highlighted():
            logger.debug(f"Navigation highlight present, not restoring {doc_id}")
            return False

        await self._sleep(INDICATOR_SETTLE_DELAY_MS / 1000)

        if self.host.active_document_id() != doc_id:
            logger.debug(f"Active document changed while restoring {doc_id}, dropping")
            return None
        if self.host.is_navigation_highlighted():
            logger.debug(f"Navigation highlight appeared, not restoring {doc_id}")
            return False

        self.apply(state)
        logger.info(f"Restored position for {doc_id}")
        return True

    def apply(self, state: EphemeralState) -> None:
        """Apply cursor and scroll independently; a failure in one doesn't block the other."""
        if state.cursor is not None:
            try:
                self.host.set_selection(state.cursor.start, state.cursor.end)
            except Exception as e:
                logger.warning(f"Failed to restore selection: {e}")

        if state.scroll and state.has_valid_scroll:
            try:
                self.host.set_scroll(state.scroll)
            except Exception as e:
                logger.warning(f"Failed to restore scroll: {e}")
