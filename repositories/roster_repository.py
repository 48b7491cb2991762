"""Roster Repository - Stores the identity roster as a JSON file."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Sequence

from pydantic import ValidationError

from core.exceptions import RosterStorageError
from repositories.interfaces.roster_repository import IRosterRepository
from repositories.models.identity_record import IdentityRecord
from services.session.roster import Identity

logger = logging.getLogger(__name__)


class JsonRosterRepository(IRosterRepository):
    """Repository for roster file I/O operations.

    The file holds a JSON array of ``{name, stars, fingerprints}`` objects.
    """

    def __init__(self, roster_file: str | Path) -> None:
        """
        Initialize roster repository.

        Args:
            roster_file: Path of the JSON file holding the roster
        """
        self.roster_file = Path(roster_file)
        self.roster_file.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Roster repository initialized | file={self.roster_file}")

    def _atomic_write_json(self, path: Path, data: Any) -> None:
        """Atomically write JSON to file using temporary file."""
        tmp = path.with_suffix(path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
        tmp.replace(path)

    def load_roster(self) -> List[Identity]:
        """
        Load roster from disk.

        Returns:
            Identities in stored order; empty if no file exists yet

        Raises:
            RosterStorageError: If the file is not a valid roster
        """
        if not self.roster_file.exists():
            return []

        try:
            with open(self.roster_file, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise RosterStorageError(f"Invalid roster data in {self.roster_file}: {e}") from e
        except OSError as e:
            raise RosterStorageError(f"Cannot read roster file {self.roster_file}: {e}") from e

        if not isinstance(raw, list):
            raise RosterStorageError(f"Roster file {self.roster_file} must hold a JSON array")

        try:
            records = [IdentityRecord.model_validate(item) for item in raw]
        except ValidationError as e:
            raise RosterStorageError(f"Invalid roster entry in {self.roster_file}: {e}") from e

        logger.debug(f"Roster loaded | identities={len(records)}")
        return [r.to_identity() for r in records]

    def save_roster(self, identities: Sequence[Identity]) -> None:
        """
        Save roster to disk.

        Args:
            identities: Full roster, in order
        """
        data = [IdentityRecord.from_identity(i).model_dump() for i in identities]
        self._atomic_write_json(self.roster_file, data)
        logger.debug(f"Roster saved | identities={len(data)}")
