import numpy as np
import pytest

from services.voice.classifier import KNNClassifier


def _candidates(*pairs):
    return [(name, np.array(vec, dtype=np.float32)) for name, vec in pairs]


def test_closest_identity_wins_single_vote_tie():
    clf = KNNClassifier(k=3)
    assert clf.classify(np.array([0.9, 0.1]), _candidates(("A", [1, 0]), ("B", [0, 1]))) == "A"


def test_majority_beats_closest():
    clf = KNNClassifier(k=3)
    candidates = _candidates(("A", [1.0, 0.0]), ("B", [1.2, 0.0]), ("B", [1.3, 0.0]), ("A", [5.0, 0.0]))
    assert clf.classify(np.array([1.0, 0.0]), candidates) == "B"


def test_tied_vote_goes_to_name_seen_first():
    clf = KNNClassifier(k=2)
    candidates = _candidates(("B", [2.0, 0.0]), ("A", [1.0, 0.0]))
    # A is nearer, so it is first among the neighbours
    assert clf.classify(np.array([0.0, 0.0]), candidates) == "A"


def test_equal_distances_keep_enumeration_order():
    clf = KNNClassifier(k=1)
    candidates = _candidates(("B", [1.0, 0.0]), ("A", [1.0, 0.0]))
    neighbors = clf.nearest(np.array([0.0, 0.0]), candidates)
    assert [n.name for n in neighbors] == ["B"]


def test_fewer_candidates_than_k():
    clf = KNNClassifier(k=3)
    neighbors = clf.nearest(np.array([0.0]), _candidates(("A", [1.0])))
    assert len(neighbors) == 1


def test_no_candidates_returns_none():
    assert KNNClassifier().classify(np.array([1.0, 0.0]), []) is None


def test_dimension_mismatch_raises():
    with pytest.raises(ValueError):
        KNNClassifier().classify(np.array([1.0, 0.0, 0.0]), _candidates(("A", [1.0, 0.0])))


def test_k_must_be_positive():
    with pytest.raises(ValueError):
        KNNClassifier(k=0)
