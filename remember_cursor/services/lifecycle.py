"""
Wiring of editor lifecycle events to the position services.

The coordinator owns the recorder, change observer and restorer, the
periodic flush timer and the pending restore task. Every handler runs on
the host's asyncio loop.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..config.settings import Settings
from ..exceptions import PositionStoreWriteError
from ..ui.protocols import EditorHost
from .change_observer import ChangeObserver
from .events import (
    DELETE,
    DOCUMENT_OPEN,
    RENAME,
    SELECTION_CHANGED,
    SHUTDOWN,
    TIMER_TICK,
    EventDispatcher,
)
from .position_store import PositionStore
from .recorder import Recorder
from .restorer import Restorer, Sleep
from .viewport_cache import RecentViewportCache

logger = logging.getLogger(__name__)


class LifecycleCoordinator:
    """Connects open/rename/delete/timer/shutdown events to the store."""

    def __init__(
        self,
        host: EditorHost,
        store: PositionStore,
        settings: Settings,
        sleep: Sleep = asyncio.sleep,
    ):
        self.host = host
        self.store = store
        self.settings = settings
        self.cache = RecentViewportCache()
        self.recorder = Recorder(store)
        self.observer = ChangeObserver(host, self.recorder)
        self.restorer = Restorer(host, store, settings, self.cache, sleep=sleep)

        self._restore_task: Optional[asyncio.Task] = None
        self._restore_target: Optional[tuple[Optional[str], Optional[str]]] = None
        self._timer_task: Optional[asyncio.Task] = None
        self._tick_flush: Optional[asyncio.Future] = None

    def register(self, dispatcher: EventDispatcher) -> None:
        dispatcher.on(DOCUMENT_OPEN, self.on_document_open)
        dispatcher.on(RENAME, self.on_rename)
        dispatcher.on(DELETE, self.on_delete)
        dispatcher.on(TIMER_TICK, self.on_timer_tick)
        dispatcher.on(SHUTDOWN, self.on_shutdown)
        dispatcher.on(SELECTION_CHANGED, self.observer.on_selection_locations)

    # ------------------------------------------------------------------
    # Startup / shutdown
    # ------------------------------------------------------------------

    def start(self) -> Optional[asyncio.Task]:
        """Load the database, start the flush timer and restore the active document.

        Returns:
            The restore task for the active document, if one was scheduled.
        """
        self.store.load()
        if self._timer_task is None or self._timer_task.done():
            self._timer_task = asyncio.get_running_loop().create_task(self._run_timer())
        if self.host.active_document_id():
            return self.on_document_open()
        return None

    async def on_shutdown(self) -> bool:
        """Stop background work and flush whatever is left."""
        if self._timer_task is not None:
            self._timer_task.cancel()
            self._timer_task = None
        self._cancel_pending_restore()
        # A periodic write still running in its thread would land after ours
        await self._wait_for_tick_flush()
        return self.flush_now()

    # ------------------------------------------------------------------
    # Document events
    # ------------------------------------------------------------------

    def on_document_open(self) -> Optional[asyncio.Task]:
        """Schedule a restore for the newly active document.

        A restore still waiting for an earlier open of another document is
        cancelled. Repeated opens of the same document in the same viewport
        keep the pending restore.
        """
        viewport = self.host.most_recent_viewport()
        target = (viewport.viewport_id if viewport else None, self.host.active_document_id())

        if self._restore_task is not None and not self._restore_task.done():
            if target == self._restore_target:
                return self._restore_task
            self._cancel_pending_restore()

        self._restore_target = target
        self._restore_task = asyncio.get_running_loop().create_task(
            self.restorer.restore_for_active_viewport()
        )
        self._restore_task.add_done_callback(_log_restore_failure)
        return self._restore_task

    def on_rename(self, old_id: str, new_id: str) -> bool:
        moved = self.store.rename(old_id, new_id)
        self.cache.rename_document(old_id, new_id)
        if moved:
            logger.debug(f"Moved position {old_id} -> {new_id}")
        return moved

    def on_delete(self, doc_id: str) -> bool:
        removed = self.store.delete(doc_id)
        if removed:
            logger.debug(f"Removed position for {doc_id}")
        return removed

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def on_timer_tick(self) -> bool:
        """Flush in a worker thread so the loop never waits on disk.

        The worker can't be stopped once started, so the write is shielded
        from cancellation and tracked until shutdown has waited for it.
        """
        snapshot = dict(self.store.working)
        self._tick_flush = asyncio.ensure_future(asyncio.to_thread(self.store.flush, snapshot))
        try:
            return await asyncio.shield(self._tick_flush)
        except PositionStoreWriteError as e:
            logger.error(f"Periodic flush failed: {e}")
            return False

    async def _wait_for_tick_flush(self) -> None:
        pending, self._tick_flush = self._tick_flush, None
        if pending is None or pending.done():
            return
        try:
            await pending
        except PositionStoreWriteError as e:
            logger.error(f"Periodic flush failed: {e}")

    def flush_now(self) -> bool:
        try:
            return self.store.flush()
        except PositionStoreWriteError as e:
            logger.error(f"Flush failed: {e}")
            return False

    async def _run_timer(self) -> None:
        interval = self.settings.save_timer_seconds
        logger.debug(f"Flushing positions every {interval:.1f}s")
        while True:
            await asyncio.sleep(interval)
            await self.on_timer_tick()

    def _cancel_pending_restore(self) -> None:
        if self._restore_task is not None and not self._restore_task.done():
            self._restore_task.cancel()
        self._restore_task = None
        self._restore_target = None


def _log_restore_failure(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.error("Restoring position failed", exc_info=error)
