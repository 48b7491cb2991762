"""Clip capture - turns uploaded voice clips into fingerprints one at a time.

A ``ClipCapture`` is the capture collaborator handed to the enrollment
workflow and the star-award path: each await consumes the next clip.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from typing import Deque, Optional, Sequence

import numpy as np

from app.config import Config
from core.exceptions import NoAudioCapturedError
from core.executors import run_cpu_bound
from core.metrics import fingerprint_extraction_time
from services.audio.mfcc import MFCCExtractor
from services.audio.utils import bytes_to_mono, resample_audio
from services.voice.vector_ops import fingerprint_from_frames

logger = logging.getLogger(__name__)


def fingerprint_from_clip(
    clip: bytes,
    extractor: MFCCExtractor,
) -> np.ndarray:
    """
    Decode one clip and reduce its MFCC frames to a fingerprint.

    Raises:
        NoAudioCapturedError: If the clip holds no audio
        FeatureExtractionError: If no usable MFCC frame was produced
    """
    if not clip:
        raise NoAudioCapturedError("No audio recorded")

    signal, sample_rate = bytes_to_mono(clip, target_sample_rate=extractor.sample_rate)
    signal = resample_audio(signal, sample_rate, extractor.sample_rate)
    if signal.size == 0:
        raise NoAudioCapturedError("No audio recorded")

    frames = extractor.extract_frames(signal)
    return fingerprint_from_frames(frames)


class ClipCapture:
    """Async capture callable backed by a queue of audio clips."""

    def __init__(
        self,
        clips: Sequence[bytes],
        extractor: Optional[MFCCExtractor] = None,
    ) -> None:
        self._clips: Deque[bytes] = deque(clips)
        self.extractor = extractor or MFCCExtractor(sample_rate=Config.SAMPLE_RATE)
        self.captured = 0

    @property
    def remaining(self) -> int:
        return len(self._clips)

    async def __call__(self) -> np.ndarray:
        """Fingerprint the next clip.

        Raises:
            NoAudioCapturedError: If the clips are exhausted or the clip is empty
            FeatureExtractionError: If no usable frames were extracted
        """
        if not self._clips:
            raise NoAudioCapturedError(
                f"No audio recorded (only {self.captured} sample(s) provided)"
            )
        clip = self._clips.popleft()

        start = time.perf_counter()
        fingerprint = await run_cpu_bound(fingerprint_from_clip, clip, self.extractor)
        fingerprint_extraction_time.observe(time.perf_counter() - start)

        self.captured += 1
        return fingerprint
