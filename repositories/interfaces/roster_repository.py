"""Roster Repository Interface."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from services.session.roster import Identity


class IRosterRepository(ABC):
    """Interface for roster persistence operations."""

    @abstractmethod
    def load_roster(self) -> List["Identity"]:
        """Load every stored identity, in roster order.

        Raises:
            RosterStorageError: If stored data exists but cannot be read
        """
        pass

    @abstractmethod
    def save_roster(self, identities: Sequence["Identity"]) -> None:
        """Persist the full roster, replacing what was stored."""
        pass
