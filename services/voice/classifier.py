"""k-nearest-neighbour speaker classifier.

Every fingerprint of every identity is a labelled point. A query is assigned
to the name that collects the most votes among the K closest points.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from app.config import Config
from services.voice.vector_ops import euclidean_distance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Neighbor:
    """One labelled fingerprint and its distance to the query."""
    name: str
    distance: float


class KNNClassifier:
    """Majority-vote classifier over a flat candidate set."""

    def __init__(self, k: int = Config.K_NEIGHBORS) -> None:
        if k <= 0:
            raise ValueError(f"k must be positive, got {k}")
        self.k = k

    def nearest(
        self,
        query: np.ndarray,
        candidates: Iterable[Tuple[str, np.ndarray]],
    ) -> List[Neighbor]:
        """Return the k nearest labelled fingerprints, closest first.

        ``sorted`` is stable, so equal distances keep enumeration order.
        """
        scored = [
            Neighbor(name=name, distance=euclidean_distance(query, fingerprint))
            for name, fingerprint in candidates
        ]
        scored.sort(key=lambda n: n.distance)
        return scored[: self.k]

    def tally(self, neighbors: List[Neighbor]) -> Dict[str, int]:
        """Count votes per name, keyed in first-seen order."""
        counts: Dict[str, int] = {}
        for neighbor in neighbors:
            counts[neighbor.name] = counts.get(neighbor.name, 0) + 1
        return counts

    def classify(
        self,
        query: np.ndarray,
        candidates: Iterable[Tuple[str, np.ndarray]],
    ) -> Optional[str]:
        """Return the winning name, or None when there is nothing to compare.

        On a tied vote the name seen first among the nearest neighbours wins.
        """
        neighbors = self.nearest(query, candidates)
        if not neighbors:
            return None

        best: Optional[str] = None
        best_count = 0
        for name, count in self.tally(neighbors).items():
            if count > best_count:
                best = name
                best_count = count

        logger.debug(
            f"k-NN vote | winner={best} | votes={best_count}/{len(neighbors)} | "
            f"nearest={[(n.name, round(n.distance, 4)) for n in neighbors]}"
        )
        return best
