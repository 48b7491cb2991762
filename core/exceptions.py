"""Custom exceptions for the application."""

from __future__ import annotations


class VoiceRosterException(Exception):
    """Base exception for the voice roster service."""
    pass


class CaptureFailure(VoiceRosterException):
    """Raised when a voice sample could not be turned into a fingerprint."""
    pass


class NoAudioCapturedError(CaptureFailure):
    """Raised when nothing was recorded in the capture window."""
    pass


class FeatureExtractionError(CaptureFailure):
    """Raised when no usable feature frames could be extracted."""
    pass


class EmptyHistoryError(VoiceRosterException):
    """Raised when undo is requested with nothing to undo."""
    pass


class EmptyRosterError(VoiceRosterException):
    """Raised when classification is requested with no enrolled identities."""
    pass


class InvalidInputError(VoiceRosterException):
    """Raised when a request is rejected before any capture begins."""
    pass


class IdentityNotFoundError(VoiceRosterException):
    """Raised when a roster position or name does not exist."""
    pass


class RosterStorageError(VoiceRosterException):
    """Raised when the persisted roster cannot be read."""
    pass
