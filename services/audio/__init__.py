"""Audio processing utilities.

This module contains audio-related utilities:
- utils: WAV/PCM decoding and resampling
- mfcc: Per-frame MFCC extraction
- capture: Clip-backed capture collaborator
"""

from services.audio.utils import bytes_to_mono, resample_audio
from services.audio.mfcc import MFCCExtractor
from services.audio.capture import ClipCapture, fingerprint_from_clip

__all__ = [
    "bytes_to_mono",
    "resample_audio",
    "MFCCExtractor",
    "ClipCapture",
    "fingerprint_from_clip",
]
