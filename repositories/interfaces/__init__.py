"""Repository interfaces for dependency inversion."""

from repositories.interfaces.roster_repository import IRosterRepository

__all__ = [
    "IRosterRepository",
]
