"""
Persistence of per-document editing positions.

The store keeps two copies of the mapping:

- the working copy, mutated live by the recorder and by rename/delete
  handling, and read by the restorer
- the last-flushed snapshot, the serialized form of what is currently on
  disk (empty if there was no file at startup), used only to decide
  whether a flush has anything to write
"""

from __future__ import annotations

import json
import logging
import threading
from typing import Any, Optional

from ..exceptions import PositionStoreReadError, PositionStoreWriteError
from ..models.positions import EphemeralState
from .filesystem import FileSystem, parent_dir

logger = logging.getLogger(__name__)

PositionMap = dict[str, EphemeralState]


def serialize_positions(positions: PositionMap) -> dict[str, dict[str, Any]]:
    """Convert a position map to its JSON-ready form."""
    return {doc_id: state.to_dict() for doc_id, state in positions.items()}


def parse_positions(data: Any) -> PositionMap:
    """Build a position map from decoded JSON.

    Raises:
        PositionStoreReadError: If the top level isn't a JSON object.
    """
    if not isinstance(data, dict):
        raise PositionStoreReadError(
            "Position database is not a JSON object", found=type(data).__name__
        )
    return {
        str(doc_id): EphemeralState.from_dict(value, doc_id=str(doc_id))
        for doc_id, value in data.items()
    }


class PositionStore:
    """Working copy of the positions plus debounced, dirty-checked writes."""

    def __init__(self, filesystem: FileSystem, db_file_name: str):
        self.filesystem = filesystem
        self.db_file_name = db_file_name
        self.working: PositionMap = {}
        self._last_flushed: dict[str, dict[str, Any]] = {}
        self._flush_lock = threading.Lock()

    def load(self) -> PositionMap:
        """Load the database into the working copy.

        A missing file gives an empty mapping. A file that can't be read or
        parsed is logged and also gives an empty mapping; this never raises.
        """
        try:
            positions = self._read()
        except PositionStoreReadError as e:
            logger.error(f"Can't read position database, starting empty: {e}")
            positions = {}

        self.working = positions
        self._last_flushed = serialize_positions(positions)
        logger.debug(f"Loaded {len(positions)} positions from {self.db_file_name}")
        return self.working

    def _read(self) -> PositionMap:
        try:
            if not self.filesystem.exists(self.db_file_name):
                return {}
            data = json.loads(self.filesystem.read(self.db_file_name))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise PositionStoreReadError(path=self.db_file_name, error=str(e)) from e
        return parse_positions(data)

    def is_dirty(self, current: Optional[PositionMap] = None) -> bool:
        """Whether the mapping differs from what was last written."""
        if current is None:
            current = self.working
        return serialize_positions(dict(current)) != self._last_flushed

    def flush(self, current: Optional[PositionMap] = None) -> bool:
        """Write the mapping to disk if it changed since the last flush.

        The mapping is captured when the call is made, so edits made while
        the write is in progress go out with the next flush. Flushes are
        serialized, so two callers can't interleave their bytes.

        Args:
            current: Mapping to persist, defaults to the working copy

        Returns:
            True if the file was written, False if nothing had changed

        Raises:
            PositionStoreWriteError: If the directory or file can't be written.
                The snapshot is left as it was, so the next flush retries.
        """
        if current is None:
            current = self.working
        captured = serialize_positions(dict(current))

        with self._flush_lock:
            if captured == self._last_flushed:
                return False

            folder = parent_dir(self.db_file_name)
            try:
                if folder and not self.filesystem.exists(folder):
                    self.filesystem.mkdir(folder)
                self.filesystem.write(self.db_file_name, json.dumps(captured))
            except OSError as e:
                raise PositionStoreWriteError(path=self.db_file_name, error=str(e)) from e

            self._last_flushed = captured

        logger.debug(f"Flushed {len(captured)} positions to {self.db_file_name}")
        return True

    def get(self, doc_id: str) -> Optional[EphemeralState]:
        return self.working.get(doc_id)

    def put(self, doc_id: str, state: EphemeralState) -> None:
        self.working[doc_id] = state

    def rename(self, old_id: str, new_id: str) -> bool:
        """Move the entry for old_id to new_id, replacing any entry there.

        Returns:
            True if there was an entry to move. If old_id has no entry, the
            mapping is left untouched and nothing is created at new_id.
        """
        if old_id not in self.working:
            return False
        if old_id == new_id:
            return True
        self.working[new_id] = self.working.pop(old_id)
        return True

    def delete(self, doc_id: str) -> bool:
        """Remove the entry for doc_id. Returns False if there was none."""
        return self.working.pop(doc_id, None) is not None
