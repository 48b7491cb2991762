"""Enrollment workflow - capture a full set of fingerprints, then commit once.

Captures run one after another. The roster is only touched after every
capture succeeded, so a failure part-way leaves it exactly as it was.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np

from app.config import Config
from core.exceptions import FeatureExtractionError, IdentityNotFoundError, InvalidInputError
from services.interfaces.i_roster_service import CaptureFn, ProgressFn
from services.session.history_manager import HistoryManager
from services.session.roster import Identity, IdentityRoster
from services.voice import fingerprint_store

logger = logging.getLogger(__name__)


def clean_name(name: Optional[str]) -> str:
    """Trim a student name, rejecting blank input.

    Raises:
        InvalidInputError: If the name is empty after trimming
    """
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidInputError("Enter a name")
    return cleaned


class EnrollmentWorkflow:
    """Drives sample capture and commits the result into the roster."""

    def __init__(
        self,
        roster: IdentityRoster,
        history: HistoryManager,
        sample_count: int = Config.MAX_FINGERPRINTS,
    ) -> None:
        self.roster = roster
        self.history = history
        self.sample_count = sample_count

    async def capture_samples(
        self,
        capture: CaptureFn,
        on_progress: Optional[ProgressFn] = None,
    ) -> List[np.ndarray]:
        """Call ``capture`` exactly ``sample_count`` times.

        Any exception from ``capture`` propagates and the collected samples
        are discarded.
        """
        samples: List[np.ndarray] = []
        for i in range(1, self.sample_count + 1):
            if on_progress is not None:
                on_progress(i, self.sample_count)
            sample = np.asarray(await capture(), dtype=np.float32).reshape(-1)
            if samples and sample.shape != samples[0].shape:
                raise FeatureExtractionError(
                    f"Fingerprint dimension changed mid-enrollment: "
                    f"{samples[0].shape[0]} -> {sample.shape[0]}"
                )
            samples.append(sample)
        return samples

    def check_dimension(self, samples: List[np.ndarray], exclude: Optional[str] = None) -> None:
        """Reject samples whose width differs from the fingerprints already enrolled.

        Fingerprints of ``exclude`` are ignored, since they are about to be replaced.

        Raises:
            FeatureExtractionError: On a dimension mismatch
        """
        if not samples:
            return
        for name, fingerprint in self.roster.candidates():
            if name == exclude:
                continue
            enrolled = np.asarray(fingerprint).reshape(-1).shape[0]
            if samples[0].shape[0] != enrolled:
                raise FeatureExtractionError(
                    f"Fingerprint dimension {samples[0].shape[0]} does not match "
                    f"enrolled dimension {enrolled}"
                )
            return

    async def enroll(
        self,
        name: str,
        capture: CaptureFn,
        on_progress: Optional[ProgressFn] = None,
    ) -> Identity:
        """Enroll ``name``, merging into an existing identity if present.

        Raises:
            InvalidInputError: If ``name`` is blank (before any capture)
            CaptureFailure: If any capture fails (nothing committed)
        """
        name = clean_name(name)
        samples = await self.capture_samples(capture, on_progress)
        self.check_dimension(samples)

        self.history.push_snapshot(self.roster)
        identity = self.roster.find(name)
        if identity is not None:
            identity.fingerprints = fingerprint_store.append(identity.fingerprints, samples)
            logger.info(
                f"Enrollment merged | name={name} | fingerprints={len(identity.fingerprints)}"
            )
        else:
            identity = Identity(name=name, stars=0, fingerprints=fingerprint_store.replace_all(samples))
            self.roster.add(identity)
            logger.info(f"Enrollment created | name={name} | fingerprints={len(samples)}")
        return identity

    async def re_enroll(
        self,
        position: int,
        capture: CaptureFn,
        on_progress: Optional[ProgressFn] = None,
    ) -> Identity:
        """Replace every fingerprint of the identity at ``position``.

        Raises:
            IdentityNotFoundError: If no identity is at ``position``
            CaptureFailure: If any capture fails (nothing committed)
        """
        name = self.roster.at(position).name
        samples = await self.capture_samples(capture, on_progress)

        # Resolve again by name; positions are not stable across awaits
        identity = self.roster.find(name)
        if identity is None:
            raise IdentityNotFoundError(f"Student {name} is no longer enrolled")
        self.check_dimension(samples, exclude=name)

        self.history.push_snapshot(self.roster)
        identity.fingerprints = fingerprint_store.replace_all(samples)
        logger.info(f"Re-enrollment committed | name={name} | fingerprints={len(samples)}")
        return identity
