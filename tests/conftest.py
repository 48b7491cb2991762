"""Shared fixtures: fake capture sources, in-memory repositories and WAV clips."""

from __future__ import annotations

import io
import wave
from collections import deque
from typing import List, Optional, Sequence

import numpy as np
import pytest

from core.exceptions import NoAudioCapturedError
from repositories.interfaces.roster_repository import IRosterRepository
from services.session.roster import Identity


class FakeCapture:
    """Async capture returning queued vectors; optionally fails on one call."""

    def __init__(self, samples: Sequence[Sequence[float]], fail_at: Optional[int] = None) -> None:
        self._samples = deque(np.asarray(s, dtype=np.float32) for s in samples)
        self.fail_at = fail_at
        self.calls = 0

    async def __call__(self) -> np.ndarray:
        self.calls += 1
        if self.fail_at is not None and self.calls == self.fail_at:
            raise NoAudioCapturedError("No audio recorded")
        if not self._samples:
            raise NoAudioCapturedError("No audio recorded")
        return self._samples.popleft()


class MemoryRosterRepository(IRosterRepository):
    def __init__(self, identities: Optional[List[Identity]] = None) -> None:
        self.identities = list(identities or [])
        self.saves: List[List[str]] = []

    def load_roster(self) -> List[Identity]:
        return list(self.identities)

    def save_roster(self, identities) -> None:
        self.saves.append([i.name for i in identities])


class FailingRosterRepository(MemoryRosterRepository):
    def save_roster(self, identities) -> None:
        raise OSError("disk full")


def pcm_to_wav(pcm: bytes, sample_rate: int = 16000, sample_width: int = 2) -> bytes:
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(sample_width)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm)
    return buffer.getvalue()


def sine_wav(freq: float, seconds: float = 1.5, sample_rate: int = 16000, amplitude: float = 0.5) -> bytes:
    t = np.arange(int(seconds * sample_rate)) / sample_rate
    pcm = (amplitude * 32767 * np.sin(2 * np.pi * freq * t)).astype(np.int16).tobytes()
    return pcm_to_wav(pcm, sample_rate)


@pytest.fixture
def make_capture():
    def factory(samples, fail_at=None):
        return FakeCapture(samples, fail_at=fail_at)
    return factory


@pytest.fixture
def memory_repository():
    return MemoryRosterRepository()


@pytest.fixture
def failing_repository():
    return FailingRosterRepository()


@pytest.fixture
def clip_440():
    return sine_wav(440.0)


@pytest.fixture
def clip_1800():
    return sine_wav(1800.0)
