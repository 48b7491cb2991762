"""Session state: the live identity roster and its undo history."""

from services.session.roster import (
    Identity,
    IdentityRoster,
    IdentitySnapshot,
    RosterSnapshot,
)
from services.session.history_manager import HistoryManager

__all__ = [
    "Identity",
    "IdentityRoster",
    "IdentitySnapshot",
    "RosterSnapshot",
    "HistoryManager",
]
