"""Decide which observed positions are worth keeping."""

import logging

from ..models.positions import EphemeralState, states_equal
from .position_store import PositionStore

logger = logging.getLogger(__name__)


class Recorder:
    """Writes changed observations into the store's working copy.

    Never touches disk; persistence is left to the periodic flush.
    """

    def __init__(self, store: PositionStore):
        self.store = store

    def observe(self, doc_id: str, candidate: EphemeralState) -> bool:
        """Record candidate for doc_id if it differs from what is stored.

        An observation made before scroll metrics are available (no scroll,
        or NaN) only gets recorded when nothing is stored yet.

        Returns:
            True if the working copy was updated.
        """
        # No active document, e.g. while switching files
        if not doc_id:
            return False

        previous = self.store.get(doc_id)
        if previous is not None:
            if not candidate.has_valid_scroll or states_equal(candidate, previous):
                return False

        self.store.put(doc_id, candidate)
        logger.debug(f"Recorded position for {doc_id}: {candidate.to_dict()}")
        return True
