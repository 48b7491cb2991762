"""API dependencies - Dependency injection for services and repositories."""

from __future__ import annotations

import logging
from functools import lru_cache

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import Config
from repositories import JsonRosterRepository
from repositories.interfaces import IRosterRepository
from services.interfaces.i_roster_service import IRosterService
from services.roster_service import RosterService

logger = logging.getLogger(__name__)

# Rate limiter
limiter = Limiter(key_func=get_remote_address)


@lru_cache()
def get_roster_repository() -> IRosterRepository:
    """Get JSON roster repository instance."""
    return JsonRosterRepository(Config.ROSTER_FILE)


@lru_cache()
def get_roster_service() -> IRosterService:
    """Get the roster session, loading the stored roster on first use."""
    service = RosterService.from_repository(get_roster_repository())
    logger.info(f"Roster session ready | file={Config.ROSTER_FILE}")
    return service
