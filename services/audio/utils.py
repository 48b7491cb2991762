"""Audio processing utilities - decoding and simple transformations."""

from __future__ import annotations

import io
import wave
from typing import Tuple

import numpy as np

from core.exceptions import NoAudioCapturedError


def bytes_to_mono(
    audio_bytes: bytes,
    target_sample_rate: int = 16000,
) -> Tuple[np.ndarray, int]:
    """
    Convert audio bytes (WAV or raw PCM) to mono signal.

    Args:
        audio_bytes: Audio data (16-bit WAV or raw 16-bit PCM)
        target_sample_rate: Sample rate assumed for raw PCM

    Returns:
        Tuple of (mono_signal in int16 scale, sample_rate)

    Raises:
        NoAudioCapturedError: If the WAV container cannot be read
    """
    # Check if WAV format
    if audio_bytes.startswith(b"RIFF"):
        try:
            with wave.open(io.BytesIO(audio_bytes), "rb") as wf:
                sample_rate = wf.getframerate()
                channels = wf.getnchannels()
                sample_width = wf.getsampwidth()
                frames = wf.readframes(wf.getnframes())
        except (wave.Error, EOFError) as e:
            raise NoAudioCapturedError(f"Unreadable WAV data: {e}") from e
        if sample_width != 2:
            raise NoAudioCapturedError(f"Unsupported sample width: {sample_width * 8} bit")
    else:
        # Assume raw PCM mono at the target rate
        sample_rate = target_sample_rate
        channels = 1
        frames = audio_bytes

    # Drop a trailing partial sample
    usable = len(frames) - (len(frames) % (2 * channels))
    raw = np.frombuffer(frames[:usable], dtype=np.int16).astype(np.float32)

    # Convert to mono if stereo
    if channels > 1:
        raw = raw.reshape(-1, channels).mean(axis=1)

    return raw, sample_rate


def resample_audio(
    signal: np.ndarray,
    src_sr: int,
    target_sr: int,
) -> np.ndarray:
    """
    Resample audio signal to target sample rate (nearest-sample).

    Args:
        signal: Input audio signal
        src_sr: Source sample rate
        target_sr: Target sample rate

    Returns:
        Resampled signal
    """
    if src_sr == target_sr or signal.size == 0:
        return signal

    ratio = target_sr / float(src_sr)
    idx = (np.arange(int(len(signal) * ratio)) / ratio).astype(np.int64)
    idx = np.clip(idx, 0, len(signal) - 1)
    return signal[idx]
