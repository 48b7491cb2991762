"""Data models for persisted roster entries."""

from repositories.models.identity_record import IdentityRecord

__all__ = ["IdentityRecord"]
