"""Undo history for roster mutations.

A snapshot of the whole roster is pushed before every mutation. Undo pops
the newest one and restores it. The stack is bounded; once full, the oldest
snapshot is dropped.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, List

from app.config import Config
from core.exceptions import EmptyHistoryError
from services.session.roster import IdentityRoster, RosterSnapshot

logger = logging.getLogger(__name__)


class HistoryManager:
    """Bounded LIFO stack of roster snapshots."""

    def __init__(self, depth: int = Config.HISTORY_DEPTH) -> None:
        if depth <= 0:
            raise ValueError(f"History depth must be positive, got {depth}")
        self.depth = depth
        # Oldest on the left; deque(maxlen) evicts from the left on overflow
        self._stack: Deque[RosterSnapshot] = deque(maxlen=depth)

    def __len__(self) -> int:
        return len(self._stack)

    @property
    def can_undo(self) -> bool:
        return bool(self._stack)

    def snapshots(self) -> List[RosterSnapshot]:
        """Snapshots oldest-first."""
        return list(self._stack)

    def push_snapshot(self, roster: IdentityRoster) -> RosterSnapshot:
        snapshot = roster.snapshot()
        if len(self._stack) == self.depth:
            logger.debug(f"History full, evicting oldest snapshot | depth={self.depth}")
        self._stack.append(snapshot)
        return snapshot

    def undo(self, roster: IdentityRoster) -> RosterSnapshot:
        """Restore ``roster`` to the most recent snapshot.

        Raises:
            EmptyHistoryError: If there is nothing to undo
        """
        if not self._stack:
            raise EmptyHistoryError("Nothing to undo")
        snapshot = self._stack.pop()
        roster.restore(snapshot)
        logger.info(f"Undo applied | remaining={len(self._stack)} | identities={len(snapshot)}")
        return snapshot
