"""In-memory identity roster and its immutable snapshots."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from core.exceptions import IdentityNotFoundError

logger = logging.getLogger(__name__)


def _frozen_copy(vector: np.ndarray) -> np.ndarray:
    """Private float32 copy that cannot be written to."""
    copy = np.array(vector, dtype=np.float32, copy=True)
    copy.setflags(write=False)
    return copy


@dataclass
class Identity:
    """An enrolled student: name, star count and reference fingerprints."""
    name: str
    stars: int = 0
    fingerprints: List[np.ndarray] = field(default_factory=list)


@dataclass(frozen=True)
class IdentitySnapshot:
    """Read-only copy of one identity."""
    name: str
    stars: int
    fingerprints: Tuple[np.ndarray, ...]

    @classmethod
    def of(cls, identity: Identity) -> "IdentitySnapshot":
        return cls(
            name=identity.name,
            stars=identity.stars,
            fingerprints=tuple(_frozen_copy(f) for f in identity.fingerprints),
        )

    def thaw(self) -> Identity:
        """Build a live identity backed by fresh writable arrays."""
        return Identity(
            name=self.name,
            stars=self.stars,
            fingerprints=[np.array(f, dtype=np.float32, copy=True) for f in self.fingerprints],
        )


@dataclass(frozen=True)
class RosterSnapshot:
    """Point-in-time copy of the whole roster, shares no storage with it."""
    identities: Tuple[IdentitySnapshot, ...]

    def __len__(self) -> int:
        return len(self.identities)


class IdentityRoster:
    """Ordered collection of identities.

    Positions are the roster order; names are unique and case-sensitive.
    """

    def __init__(self, identities: Optional[Sequence[Identity]] = None) -> None:
        self._identities: List[Identity] = []
        for identity in identities or []:
            if self.find(identity.name) is not None:
                logger.warning(f"Duplicate identity ignored | name={identity.name}")
                continue
            self._identities.append(identity)

    def __len__(self) -> int:
        return len(self._identities)

    def __iter__(self) -> Iterator[Identity]:
        return iter(self._identities)

    @property
    def identities(self) -> Tuple[Identity, ...]:
        return tuple(self._identities)

    def find(self, name: str) -> Optional[Identity]:
        for identity in self._identities:
            if identity.name == name:
                return identity
        return None

    def at(self, position: int) -> Identity:
        """Return the identity at ``position``.

        Raises:
            IdentityNotFoundError: If the position is out of range
        """
        if position < 0 or position >= len(self._identities):
            raise IdentityNotFoundError(f"No student at position {position}")
        return self._identities[position]

    def add(self, identity: Identity) -> None:
        if self.find(identity.name) is not None:
            raise ValueError(f"Identity already enrolled: {identity.name}")
        self._identities.append(identity)

    def remove_at(self, position: int) -> Identity:
        identity = self.at(position)
        del self._identities[position]
        return identity

    def candidates(self) -> Iterator[Tuple[str, np.ndarray]]:
        """Yield ``(name, fingerprint)`` in roster order then fingerprint order."""
        for identity in self._identities:
            for fingerprint in identity.fingerprints:
                yield identity.name, fingerprint

    def fingerprint_count(self) -> int:
        return sum(len(i.fingerprints) for i in self._identities)

    def snapshot(self) -> RosterSnapshot:
        return RosterSnapshot(identities=tuple(IdentitySnapshot.of(i) for i in self._identities))

    def restore(self, snapshot: RosterSnapshot) -> None:
        """Replace the live contents with a deep copy of ``snapshot``."""
        self._identities = [s.thaw() for s in snapshot.identities]
