"""Bounded per-identity fingerprint collection.

Both operations return a new list; callers assign the result back onto the
identity they own.
"""

from __future__ import annotations

from typing import List, Sequence

import numpy as np

from app.config import Config


def append(
    existing: Sequence[np.ndarray],
    new_samples: Sequence[np.ndarray],
    capacity: int = Config.MAX_FINGERPRINTS,
) -> List[np.ndarray]:
    """Append samples, evicting the oldest ones beyond ``capacity``."""
    merged = list(existing) + list(new_samples)
    overflow = len(merged) - capacity
    if overflow > 0:
        # Oldest first out
        merged = merged[overflow:]
    return merged


def replace_all(new_samples: Sequence[np.ndarray]) -> List[np.ndarray]:
    """Discard prior fingerprints and keep exactly ``new_samples``."""
    return list(new_samples)
