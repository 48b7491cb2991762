"""Roster Service Interface - Abstract base for the enrollment/identification session."""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

import numpy as np

CaptureFn = Callable[[], Awaitable[np.ndarray]]
ProgressFn = Callable[[int, int], None]


@dataclass(frozen=True)
class OperationResult:
    """Outcome of one roster operation, as reported to the presentation layer."""
    success: bool
    status: str
    name: Optional[str] = None


@dataclass(frozen=True)
class IdentityView:
    """Read-only row of the roster."""
    position: int
    name: str
    stars: int
    fingerprint_count: int


class IRosterService(ABC):
    """Interface for roster business logic.

    Every operation reports its outcome as an ``OperationResult``; none of
    the domain errors escape to the caller.
    """

    @property
    @abstractmethod
    def busy(self) -> bool:
        """True while a capture-driven operation is in flight."""
        pass

    @property
    @abstractmethod
    def can_undo(self) -> bool:
        pass

    @property
    @abstractmethod
    def last_status(self) -> str:
        pass

    @abstractmethod
    def view(self) -> List[IdentityView]:
        """Current roster in roster order."""
        pass

    @abstractmethod
    def sorted_view(self, column: str, descending: bool = False) -> List[IdentityView]:
        """Roster sorted by ``column`` ('name' or 'stars') without reordering it."""
        pass

    @abstractmethod
    async def enroll(
        self,
        name: str,
        capture: CaptureFn,
        on_progress: Optional[ProgressFn] = None,
    ) -> OperationResult:
        """Capture a full sample set and enroll or extend ``name``."""
        pass

    @abstractmethod
    async def re_enroll(
        self,
        position: int,
        capture: CaptureFn,
        on_progress: Optional[ProgressFn] = None,
    ) -> OperationResult:
        """Capture a full sample set and replace the fingerprints at ``position``."""
        pass

    @abstractmethod
    async def award_star(self, capture: CaptureFn) -> OperationResult:
        """Capture one sample, identify the speaker and give them a star."""
        pass

    @abstractmethod
    def add_star(self, position: int) -> OperationResult:
        pass

    @abstractmethod
    def remove_star(self, position: int) -> OperationResult:
        pass

    @abstractmethod
    def drop(self, position: int) -> OperationResult:
        pass

    @abstractmethod
    def reset_stars(self) -> OperationResult:
        pass

    @abstractmethod
    def undo(self) -> OperationResult:
        pass
