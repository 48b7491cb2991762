"""Health check utilities for dependency verification."""

import logging
import os
from typing import Dict, Any
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


async def check_roster_storage_health(roster_file: str) -> Dict[str, Any]:
    """Check that the roster file location can be written."""
    try:
        roster_dir = os.path.dirname(os.path.abspath(roster_file)) or "."
        if not os.path.isdir(roster_dir):
            return {
                "status": "unhealthy",
                "message": f"Roster directory '{roster_dir}' does not exist"
            }
        if not os.access(roster_dir, os.W_OK):
            return {
                "status": "unhealthy",
                "message": f"Roster directory '{roster_dir}' is not writable"
            }
        if not os.path.exists(roster_file):
            return {
                "status": "degraded",
                "message": "No roster saved yet"
            }
        return {
            "status": "healthy",
            "message": "Roster file accessible",
            "size_bytes": os.path.getsize(roster_file)
        }
    except OSError as e:
        logger.error(f"Roster storage health check failed: {e}")
        return {
            "status": "unhealthy",
            "message": str(e)
        }


async def check_session_health(roster_service) -> Dict[str, Any]:
    """Report the live session state."""
    try:
        views = roster_service.view()
        return {
            "status": "healthy",
            "message": roster_service.last_status,
            "identities": len(views),
            "busy": roster_service.busy,
            "can_undo": roster_service.can_undo
        }
    except Exception as e:
        logger.error(f"Session health check failed: {e}")
        return {
            "status": "unhealthy",
            "message": str(e)
        }


async def get_comprehensive_health(
    roster_file: str = None,
    roster_service=None
) -> Dict[str, Any]:
    """Get comprehensive health check for all dependencies."""

    checks = {}

    if roster_file:
        checks["roster_storage"] = await check_roster_storage_health(roster_file)

    if roster_service is not None:
        checks["session"] = await check_session_health(roster_service)

    # Determine overall status
    all_healthy = all(
        check.get("status") == "healthy"
        for check in checks.values()
    )

    any_unhealthy = any(
        check.get("status") == "unhealthy"
        for check in checks.values()
    )

    if all_healthy:
        overall_status = "healthy"
    elif any_unhealthy:
        overall_status = "unhealthy"
    else:
        overall_status = "degraded"

    return {
        "status": overall_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": checks
    }
