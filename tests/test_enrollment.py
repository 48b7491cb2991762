import numpy as np
import pytest

from core.exceptions import FeatureExtractionError, IdentityNotFoundError, InvalidInputError, NoAudioCapturedError
from services.session.history_manager import HistoryManager
from services.session.roster import Identity, IdentityRoster
from services.voice.enrollment import EnrollmentWorkflow, clean_name


def _workflow(identities=None, sample_count=10):
    roster = IdentityRoster(identities or [])
    history = HistoryManager()
    return EnrollmentWorkflow(roster, history, sample_count=sample_count), roster, history


def _samples(count, start=0):
    return [[float(start + i), 1.0] for i in range(count)]


def test_clean_name_trims_and_rejects_blank():
    assert clean_name("  Ada ") == "Ada"
    for blank in ("", "   ", None):
        with pytest.raises(InvalidInputError, match="Enter a name"):
            clean_name(blank)


@pytest.mark.asyncio
async def test_enroll_new_identity(make_capture):
    workflow, roster, history = _workflow()
    progress = []
    capture = make_capture(_samples(10))

    identity = await workflow.enroll("Ada", capture, lambda i, n: progress.append((i, n)))

    assert identity.name == "Ada" and identity.stars == 0
    assert len(identity.fingerprints) == 10
    assert capture.calls == 10
    assert progress == [(i, 10) for i in range(1, 11)]
    assert len(history) == 1
    assert len(history.snapshots()[0]) == 0


@pytest.mark.asyncio
async def test_blank_name_captures_nothing(make_capture):
    workflow, roster, history = _workflow()
    capture = make_capture(_samples(10))
    with pytest.raises(InvalidInputError):
        await workflow.enroll("  ", capture)
    assert capture.calls == 0
    assert len(roster) == 0 and len(history) == 0


@pytest.mark.asyncio
async def test_failed_capture_commits_nothing_for_new_identity(make_capture):
    workflow, roster, history = _workflow()
    with pytest.raises(NoAudioCapturedError):
        await workflow.enroll("Ada", make_capture(_samples(10), fail_at=7))
    assert len(roster) == 0
    assert len(history) == 0


@pytest.mark.asyncio
async def test_failed_capture_commits_nothing_for_existing_identity(make_capture):
    existing = Identity(name="Ada", stars=2, fingerprints=[np.array([0.0, 0.0])] * 3)
    workflow, roster, history = _workflow([existing])
    with pytest.raises(NoAudioCapturedError):
        await workflow.enroll("Ada", make_capture(_samples(10), fail_at=7))
    assert len(roster.find("Ada").fingerprints) == 3
    assert roster.find("Ada").stars == 2
    assert len(history) == 0


@pytest.mark.asyncio
async def test_enroll_existing_merges_and_evicts_oldest(make_capture):
    old = [np.array([float(i), 0.0], dtype=np.float32) for i in range(8)]
    workflow, roster, _ = _workflow([Identity(name="Ada", stars=4, fingerprints=old)], sample_count=4)

    await workflow.enroll("Ada", make_capture(_samples(4, start=100)))

    identity = roster.find("Ada")
    assert identity.stars == 4
    assert len(identity.fingerprints) == 10
    assert [float(f[0]) for f in identity.fingerprints] == [2, 3, 4, 5, 6, 7, 100, 101, 102, 103]


@pytest.mark.asyncio
async def test_re_enroll_replaces_all_fingerprints(make_capture):
    old = [np.array([9.0, 9.0], dtype=np.float32)] * 10
    workflow, roster, history = _workflow([Identity(name="Ada", stars=3, fingerprints=old)])

    await workflow.re_enroll(0, make_capture(_samples(10)))

    identity = roster.find("Ada")
    assert identity.stars == 3
    assert [float(f[0]) for f in identity.fingerprints] == [float(i) for i in range(10)]
    assert len(history) == 1


@pytest.mark.asyncio
async def test_re_enroll_failure_keeps_old_fingerprints(make_capture):
    old = [np.array([9.0, 9.0], dtype=np.float32)] * 10
    workflow, roster, history = _workflow([Identity(name="Ada", fingerprints=old)])

    with pytest.raises(NoAudioCapturedError):
        await workflow.re_enroll(0, make_capture(_samples(10), fail_at=3))
    assert all(float(f[0]) == 9.0 for f in roster.find("Ada").fingerprints)
    assert len(history) == 0


@pytest.mark.asyncio
async def test_re_enroll_unknown_position(make_capture):
    workflow, _, _ = _workflow()
    capture = make_capture(_samples(10))
    with pytest.raises(IdentityNotFoundError):
        await workflow.re_enroll(0, capture)
    assert capture.calls == 0


@pytest.mark.asyncio
async def test_enroll_rejects_width_different_from_roster(make_capture):
    ada = Identity(name="Ada", fingerprints=[np.array([1.0, 0.0], dtype=np.float32)] * 10)
    workflow, roster, history = _workflow([ada])

    with pytest.raises(FeatureExtractionError):
        await workflow.enroll("Bob", make_capture([[1.0, 0.0, 0.0]] * 10))
    assert [i.name for i in roster] == ["Ada"]
    assert len(history) == 0

    with pytest.raises(FeatureExtractionError):
        await workflow.enroll("Ada", make_capture([[1.0, 0.0, 0.0]] * 10))
    assert len(roster.find("Ada").fingerprints) == 10


@pytest.mark.asyncio
async def test_re_enroll_sole_identity_may_change_width(make_capture):
    ada = Identity(name="Ada", fingerprints=[np.array([1.0, 0.0], dtype=np.float32)] * 10)
    bob = Identity(name="Bob")
    workflow, roster, _ = _workflow([ada, bob])

    await workflow.re_enroll(0, make_capture([[1.0, 0.0, 0.0]] * 10))
    assert roster.find("Ada").fingerprints[0].shape == (3,)


@pytest.mark.asyncio
async def test_re_enroll_rejects_width_different_from_others(make_capture):
    ada = Identity(name="Ada", fingerprints=[np.array([1.0, 0.0], dtype=np.float32)] * 10)
    bob = Identity(name="Bob", fingerprints=[np.array([0.0, 1.0], dtype=np.float32)] * 10)
    workflow, roster, history = _workflow([ada, bob])

    with pytest.raises(FeatureExtractionError):
        await workflow.re_enroll(1, make_capture([[1.0, 0.0, 0.0]] * 10))
    assert roster.find("Bob").fingerprints[0].shape == (2,)
    assert len(history) == 0
