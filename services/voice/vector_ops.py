"""Vector helpers for fingerprint post-processing and comparison."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from core.exceptions import FeatureExtractionError


def normalize(vector: np.ndarray) -> np.ndarray:
    """L2-normalize a vector.

    A zero vector has no direction; the divisor falls back to 1 so the
    vector is returned unchanged instead of producing NaNs.
    """
    v = np.asarray(vector, dtype=np.float32)
    norm = float(np.linalg.norm(v))
    if norm == 0.0:
        norm = 1.0
    return v / norm


def average(vectors: Sequence[np.ndarray]) -> np.ndarray:
    """Element-wise mean of equal-length vectors.

    Raises:
        ValueError: If ``vectors`` is empty or the lengths differ
    """
    if len(vectors) == 0:
        raise ValueError("average() requires at least one vector")

    length = len(vectors[0])
    for v in vectors:
        if len(v) != length:
            raise ValueError(f"Vector length mismatch: expected {length}, got {len(v)}")

    stacked = np.vstack([np.asarray(v, dtype=np.float32) for v in vectors])
    return stacked.mean(axis=0).astype(np.float32)


def euclidean_distance(a: np.ndarray, b: np.ndarray) -> float:
    """Euclidean distance between two equal-length vectors."""
    a = np.asarray(a, dtype=np.float32)
    b = np.asarray(b, dtype=np.float32)
    if a.shape != b.shape:
        raise ValueError(f"Vector shape mismatch: {a.shape} vs {b.shape}")
    diff = a - b
    return float(np.sqrt(np.sum(diff * diff)))


def fingerprint_from_frames(frames: Sequence[np.ndarray]) -> np.ndarray:
    """Collapse per-frame feature vectors into one fingerprint.

    Each frame is normalized on its own, then the normalized frames are
    averaged.

    Raises:
        FeatureExtractionError: If there are no frames to average
    """
    if len(frames) == 0:
        raise FeatureExtractionError("MFCC extraction failed")
    return average([normalize(f) for f in frames])
