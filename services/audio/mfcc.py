"""MFCC frame extraction.

The signal is cut into consecutive, non-overlapping frames of
``frame_size`` samples and one MFCC vector is computed per frame.
"""

from __future__ import annotations

import logging
from typing import List

import librosa
import numpy as np

from app.config import Config
from core.exceptions import NoAudioCapturedError

logger = logging.getLogger(__name__)

# Mel bands feeding the cepstrum
DEFAULT_MEL_BANDS = 26


class MFCCExtractor:
    """Per-frame MFCC features for a mono signal."""

    def __init__(
        self,
        sample_rate: int = Config.SAMPLE_RATE,
        frame_size: int = Config.MFCC_FRAME_SIZE,
        n_mfcc: int = Config.MFCC_COEFFICIENTS,
        n_mels: int = DEFAULT_MEL_BANDS,
    ) -> None:
        self.sample_rate = sample_rate
        self.frame_size = frame_size
        self.n_mfcc = n_mfcc
        self.n_mels = n_mels

    def extract_frames(self, signal: np.ndarray) -> List[np.ndarray]:
        """
        Compute one MFCC vector per full frame.

        Args:
            signal: Mono signal in int16 scale at ``sample_rate``

        Returns:
            MFCC vectors of length ``n_mfcc``. Frames of digital silence and
            frames with non-finite coefficients are left out, so the list may
            be empty.

        Raises:
            NoAudioCapturedError: If the signal is shorter than one frame
        """
        signal = np.asarray(signal, dtype=np.float32).reshape(-1)
        num_frames = signal.size // self.frame_size
        if num_frames == 0:
            raise NoAudioCapturedError("No audio recorded")

        y = signal[: num_frames * self.frame_size] / 32768.0
        coeffs = librosa.feature.mfcc(
            y=y,
            sr=self.sample_rate,
            n_mfcc=self.n_mfcc,
            n_fft=self.frame_size,
            hop_length=self.frame_size,
            n_mels=self.n_mels,
            center=False,
        )

        frames = y.reshape(num_frames, self.frame_size)
        energy = np.sum(frames * frames, axis=1)

        usable: List[np.ndarray] = []
        for i in range(min(num_frames, coeffs.shape[1])):
            vector = coeffs[:, i].astype(np.float32)
            if energy[i] == 0.0 or not np.all(np.isfinite(vector)):
                continue
            usable.append(vector)

        logger.debug(f"MFCC frames | total={num_frames} | usable={len(usable)}")
        return usable
