"""Roster Service - Business logic for enrollment, star awards and undo.

One ``RosterService`` is one session: it owns the live roster, the undo
history and the classifier. Every mutation is framed the same way:
snapshot, apply, save. Domain errors are turned into status strings here
and never reach the caller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional, Sequence

from app.config import Config
from core.exceptions import (
    CaptureFailure,
    EmptyHistoryError,
    EmptyRosterError,
    IdentityNotFoundError,
    InvalidInputError,
    RosterStorageError,
)
from core.metrics import (
    enrollment_total,
    history_depth,
    identification_total,
    roster_mutations,
    roster_size,
    undo_total,
)
from repositories.interfaces.roster_repository import IRosterRepository
from services.interfaces.i_roster_service import (
    CaptureFn,
    IdentityView,
    IRosterService,
    OperationResult,
    ProgressFn,
)
from services.session.history_manager import HistoryManager
from services.session.roster import Identity, IdentityRoster
from services.voice.classifier import KNNClassifier
from services.voice.enrollment import EnrollmentWorkflow, clean_name
from services.voice.vector_ops import normalize

logger = logging.getLogger(__name__)

SORT_COLUMNS = ("name", "stars")


class RosterService(IRosterService):
    """Voice star roster session."""

    def __init__(
        self,
        repository: Optional[IRosterRepository] = None,
        initial_roster: Optional[Sequence[Identity]] = None,
        classifier: Optional[KNNClassifier] = None,
        history_depth: int = Config.HISTORY_DEPTH,
        sample_count: int = Config.MAX_FINGERPRINTS,
    ) -> None:
        """
        Initialize roster service.

        Args:
            repository: Persistence collaborator, saved after every commit
            initial_roster: Identities to start from
            classifier: k-NN classifier (default K = Config.K_NEIGHBORS)
            history_depth: Number of undo snapshots kept
            sample_count: Captures per enrollment
        """
        self.repository = repository
        self.roster = IdentityRoster(initial_roster or [])
        self.history = HistoryManager(depth=history_depth)
        self.classifier = classifier or KNNClassifier()
        self.workflow = EnrollmentWorkflow(self.roster, self.history, sample_count=sample_count)
        self._last_status = "Ready"
        self._capture_lock = asyncio.Lock()
        self._update_gauges()
        logger.info(
            f"Roster service initialized | identities={len(self.roster)} | "
            f"k={self.classifier.k} | history_depth={history_depth}"
        )

    @classmethod
    def from_repository(cls, repository: IRosterRepository, **kwargs) -> "RosterService":
        """Build a session from the stored roster.

        An unreadable roster is logged and the session starts empty.
        """
        try:
            identities = repository.load_roster()
        except RosterStorageError as e:
            logger.warning(f"Could not load roster, starting empty: {e}")
            identities = []
        return cls(repository=repository, initial_roster=identities, **kwargs)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def busy(self) -> bool:
        return self._capture_lock.locked()

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def last_status(self) -> str:
        return self._last_status

    def view(self) -> List[IdentityView]:
        return [
            IdentityView(
                position=i,
                name=identity.name,
                stars=identity.stars,
                fingerprint_count=len(identity.fingerprints),
            )
            for i, identity in enumerate(self.roster)
        ]

    def sorted_view(self, column: str, descending: bool = False) -> List[IdentityView]:
        if column not in SORT_COLUMNS:
            raise ValueError(f"Unknown sort column: {column}")
        if column == "name":
            key: Callable[[IdentityView], object] = lambda v: v.name.casefold()
        else:
            key = lambda v: v.stars
        return sorted(self.view(), key=key, reverse=descending)

    # ------------------------------------------------------------------
    # Framing helpers
    # ------------------------------------------------------------------

    def _report(self, success: bool, status: str, name: Optional[str] = None) -> OperationResult:
        self._last_status = status
        return OperationResult(success=success, status=status, name=name)

    def _commit(self, kind: str) -> None:
        """Count a committed mutation and hand the roster to persistence."""
        roster_mutations.labels(kind=kind).inc()
        self._update_gauges()
        self._persist()

    def _persist(self) -> None:
        if self.repository is None:
            return
        try:
            self.repository.save_roster(self.roster.identities)
        except Exception as e:
            # Non-fatal: the in-memory roster stays authoritative
            logger.warning(f"Failed to save roster: {e}")

    def _update_gauges(self) -> None:
        roster_size.set(len(self.roster))
        history_depth.set(len(self.history))

    def _require_candidates(self) -> None:
        """Raises EmptyRosterError when there is nothing to classify against."""
        if len(self.roster) == 0:
            raise EmptyRosterError("No students enrolled")
        if self.roster.fingerprint_count() == 0:
            raise EmptyRosterError("No enrolled fingerprints to compare against")

    def _status_progress(self, verb: str, name: str, on_progress: Optional[ProgressFn]) -> ProgressFn:
        def progress(index: int, total: int) -> None:
            self._last_status = f"{verb} sample {index}/{total} for {name}..."
            if on_progress is not None:
                on_progress(index, total)
        return progress

    # ------------------------------------------------------------------
    # Capture-driven operations
    # ------------------------------------------------------------------

    async def enroll(
        self,
        name: str,
        capture: CaptureFn,
        on_progress: Optional[ProgressFn] = None,
    ) -> OperationResult:
        try:
            name = clean_name(name)
        except InvalidInputError as e:
            enrollment_total.labels(mode="enroll", status="invalid").inc()
            return self._report(False, str(e))

        async with self._capture_lock:
            try:
                await self.workflow.enroll(
                    name, capture, self._status_progress("Recording", name, on_progress)
                )
            except CaptureFailure as e:
                logger.warning(f"Enrollment aborted | name={name} | reason={e}")
                enrollment_total.labels(mode="enroll", status="capture_failed").inc()
                return self._report(False, "Failed to record", name)
            except Exception:
                logger.exception(f"Unexpected error during enrollment | name={name}")
                enrollment_total.labels(mode="enroll", status="capture_failed").inc()
                return self._report(False, "Failed to record", name)

        enrollment_total.labels(mode="enroll", status="success").inc()
        self._commit("enroll")
        return self._report(True, f"Enrolled {name}", name)

    async def re_enroll(
        self,
        position: int,
        capture: CaptureFn,
        on_progress: Optional[ProgressFn] = None,
    ) -> OperationResult:
        try:
            name = self.roster.at(position).name
        except IdentityNotFoundError as e:
            enrollment_total.labels(mode="re_enroll", status="invalid").inc()
            return self._report(False, str(e))

        async with self._capture_lock:
            try:
                await self.workflow.re_enroll(
                    position, capture, self._status_progress("Re-recording", name, on_progress)
                )
            except (CaptureFailure, IdentityNotFoundError) as e:
                logger.warning(f"Re-enrollment aborted | name={name} | reason={e}")
                enrollment_total.labels(mode="re_enroll", status="capture_failed").inc()
                return self._report(False, "Failed to re-record", name)
            except Exception:
                logger.exception(f"Unexpected error during re-enrollment | name={name}")
                enrollment_total.labels(mode="re_enroll", status="capture_failed").inc()
                return self._report(False, "Failed to re-record", name)

        enrollment_total.labels(mode="re_enroll", status="success").inc()
        self._commit("re_enroll")
        return self._report(True, f"Re-recorded {name}", name)

    async def award_star(self, capture: CaptureFn) -> OperationResult:
        """Identify the speaker of one captured sample and award a star."""
        try:
            self._require_candidates()
        except EmptyRosterError as e:
            logger.info(f"Star award skipped: {e}")
            identification_total.labels(outcome="empty_roster").inc()
            return self._report(False, "No match found")

        async with self._capture_lock:
            self._last_status = "Recording..."
            try:
                query = normalize(await capture())
            except CaptureFailure as e:
                logger.warning(f"Star award capture failed: {e}")
                identification_total.labels(outcome="capture_failed").inc()
                return self._report(False, "Recording failed")
            except Exception:
                logger.exception("Unexpected error during star award capture")
                identification_total.labels(outcome="capture_failed").inc()
                return self._report(False, "Recording failed")

            try:
                matched = self.classifier.classify(query, self.roster.candidates())
            except ValueError as e:
                # Query dimension does not match the enrolled fingerprints
                logger.warning(f"Classification failed: {e}")
                identification_total.labels(outcome="capture_failed").inc()
                return self._report(False, "Recording failed")

            identity = self.roster.find(matched) if matched is not None else None
            if identity is None:
                identification_total.labels(outcome="no_match").inc()
                return self._report(False, "No match found")

            self.history.push_snapshot(self.roster)
            identity.stars += 1

        identification_total.labels(outcome="matched").inc()
        logger.info(f"Star awarded | name={identity.name} | stars={identity.stars}")
        self._commit("award")
        return self._report(True, f"Star awarded to {identity.name}", identity.name)

    # ------------------------------------------------------------------
    # Direct mutations
    # ------------------------------------------------------------------

    def add_star(self, position: int) -> OperationResult:
        try:
            identity = self.roster.at(position)
        except IdentityNotFoundError as e:
            return self._report(False, str(e))

        self.history.push_snapshot(self.roster)
        identity.stars += 1
        self._commit("star_up")
        return self._report(True, f"Added a star to {identity.name}", identity.name)

    def remove_star(self, position: int) -> OperationResult:
        try:
            identity = self.roster.at(position)
        except IdentityNotFoundError as e:
            return self._report(False, str(e))

        self.history.push_snapshot(self.roster)
        if identity.stars > 0:
            identity.stars -= 1
        self._commit("star_down")
        return self._report(True, f"Removed a star from {identity.name}", identity.name)

    def drop(self, position: int) -> OperationResult:
        try:
            self.roster.at(position)
        except IdentityNotFoundError as e:
            return self._report(False, str(e))

        self.history.push_snapshot(self.roster)
        dropped = self.roster.remove_at(position)
        logger.info(f"Identity dropped | name={dropped.name}")
        self._commit("drop")
        return self._report(True, f"Dropped {dropped.name}", dropped.name)

    def reset_stars(self) -> OperationResult:
        if len(self.roster) == 0:
            return self._report(False, "No students to clear stars for")

        # One snapshot covers the whole bulk reset
        self.history.push_snapshot(self.roster)
        for identity in self.roster:
            identity.stars = 0
        self._commit("reset_stars")
        return self._report(True, "All stars cleared")

    def undo(self) -> OperationResult:
        try:
            self.history.undo(self.roster)
        except EmptyHistoryError as e:
            undo_total.labels(status="empty").inc()
            return self._report(False, str(e))

        undo_total.labels(status="applied").inc()
        self._update_gauges()
        self._persist()
        return self._report(True, "Undo complete")
