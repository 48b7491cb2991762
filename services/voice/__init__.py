"""Voice fingerprint processing modules.

Contains:
- vector_ops: Normalization, averaging and distance helpers
- fingerprint_store: Bounded per-identity fingerprint collection
- classifier: k-NN majority-vote classifier
- enrollment: Capture-then-commit enrollment workflow
"""

from services.voice.vector_ops import (
    normalize,
    average,
    euclidean_distance,
    fingerprint_from_frames,
)
from services.voice.classifier import KNNClassifier, Neighbor
from services.voice.enrollment import EnrollmentWorkflow, clean_name

__all__ = [
    # Vector helpers
    "normalize",
    "average",
    "euclidean_distance",
    "fingerprint_from_frames",
    # Classifier
    "KNNClassifier",
    "Neighbor",
    # Enrollment
    "EnrollmentWorkflow",
    "clean_name",
]
