"""Application configuration and environment variables."""

from __future__ import annotations

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _parse_int_env(name: str, default: int) -> int:
    """Parse int from env safely, tolerating values like 'NAME=123' or quoted strings.
    Returns default on any parsing issue.
    """
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    # Accept accidental 'KEY=VALUE' format
    if "=" in raw:
        raw = raw.split("=", 1)[1]
    raw = raw.strip().strip("'").strip('"')
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float_env(name: str, default: float) -> float:
    """Float counterpart of _parse_int_env."""
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    if "=" in raw:
        raw = raw.split("=", 1)[1]
    raw = raw.strip().strip("'").strip('"')
    try:
        return float(raw)
    except ValueError:
        return default


class Config:
    """Application configuration class."""

    # Roster engine constants (fixed, not overridable from the environment)
    MAX_FINGERPRINTS: int = 10
    K_NEIGHBORS: int = 3
    HISTORY_DEPTH: int = 20

    # Capture / feature extraction
    SAMPLE_RATE: int = _parse_int_env("SAMPLE_RATE", 16000)
    # Length of one recorded sample; clients use it to size their clips
    RECORD_DURATION_SECONDS: float = _parse_float_env("RECORD_DURATION_SECONDS", 1.5)
    # One MFCC vector per frame of this many samples
    MFCC_FRAME_SIZE: int = _parse_int_env("MFCC_FRAME_SIZE", 1024)
    MFCC_COEFFICIENTS: int = _parse_int_env("MFCC_COEFFICIENTS", 13)
    MAX_AUDIO_SIZE_MB: int = _parse_int_env("MAX_AUDIO_SIZE_MB", 6)
    MAX_AUDIO_BYTES: int = MAX_AUDIO_SIZE_MB * 1024 * 1024

    # Rate limit for the star-award endpoint (slowapi syntax)
    AWARD_RATE_LIMIT: str = os.getenv("AWARD_RATE_LIMIT", "60/minute")

    # Application
    APP_TITLE: str = "Voice Star Roster"
    APP_DESCRIPTION: str = "Voice fingerprint enrollment, k-NN identification and star tracking"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Paths
    PROJECT_ROOT: str = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    DATA_DIR: str = os.getenv("DATA_DIR", os.path.join(PROJECT_ROOT, "data"))
    ROSTER_FILE: str = os.getenv("ROSTER_FILE", os.path.join(DATA_DIR, "students.json"))

    # CORS
    CORS_ORIGINS: list[str] = ["*"]  # Tighten in production
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list[str] = ["*"]
    CORS_ALLOW_HEADERS: list[str] = ["*"]

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and make sure the data directory exists."""
        if cls.MFCC_FRAME_SIZE <= 0:
            raise ValueError("MFCC_FRAME_SIZE must be positive")
        if cls.MFCC_COEFFICIENTS <= 0:
            raise ValueError("MFCC_COEFFICIENTS must be positive")

        roster_dir = os.path.dirname(os.path.abspath(cls.ROSTER_FILE))
        os.makedirs(roster_dir, exist_ok=True)
