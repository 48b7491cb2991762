"""Identity Record - Pydantic schema of one persisted roster entry."""

from __future__ import annotations

import logging
from typing import List

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

from services.session.roster import Identity

logger = logging.getLogger(__name__)


class IdentityRecord(BaseModel):
    """On-disk form of an identity: ``{name, stars, fingerprints}``."""

    model_config = ConfigDict(extra="ignore")

    name: str
    stars: int = 0
    fingerprints: List[List[float]] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Names load verbatim; only blank names are rejected."""
        if not v.strip():
            raise ValueError("Identity name must not be blank")
        return v

    @field_validator("stars", mode="before")
    @classmethod
    def validate_stars(cls, v):
        """Missing or negative star counts load as 0."""
        if v is None:
            return 0
        return max(0, int(v))

    @field_validator("fingerprints")
    @classmethod
    def validate_fingerprints(cls, v: List[List[float]]) -> List[List[float]]:
        """Warn on mixed dimensions; the classifier needs them equal."""
        if v:
            dims = {len(f) for f in v}
            if len(dims) > 1:
                logger.warning(f"Fingerprint dimension mismatch in record: {sorted(dims)}")
        return v

    @classmethod
    def from_identity(cls, identity: Identity) -> "IdentityRecord":
        return cls(
            name=identity.name,
            stars=identity.stars,
            fingerprints=[np.asarray(f, dtype=np.float32).tolist() for f in identity.fingerprints],
        )

    def to_identity(self) -> Identity:
        return Identity(
            name=self.name,
            stars=self.stars,
            fingerprints=[np.asarray(f, dtype=np.float32) for f in self.fingerprints],
        )
