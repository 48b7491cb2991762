"""Repositories - Data access layer."""

from repositories.roster_repository import JsonRosterRepository

# Interfaces
from repositories.interfaces import IRosterRepository

# Models
from repositories.models import IdentityRecord

__all__ = [
    "JsonRosterRepository",
    # Interfaces
    "IRosterRepository",
    # Models
    "IdentityRecord",
]
