"""Roster API schemas - Request/Response DTOs for Swagger documentation."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from services.interfaces.i_roster_service import IdentityView, IRosterService, OperationResult


# ============================================================================
# Response Models - Roster
# ============================================================================

class IdentityRow(BaseModel):
    """One enrolled student."""
    position: int = Field(..., ge=0, description="Roster position used by mutation endpoints")
    name: str = Field(..., description="Student name (unique, case-sensitive)")
    stars: int = Field(..., ge=0, description="Current star count")
    fingerprint_count: int = Field(..., ge=0, description="Stored reference fingerprints")

    @classmethod
    def from_view(cls, view: IdentityView) -> "IdentityRow":
        return cls(
            position=view.position,
            name=view.name,
            stars=view.stars,
            fingerprint_count=view.fingerprint_count,
        )


class RosterResponse(BaseModel):
    """Current roster plus session status."""
    students: List[IdentityRow] = Field(default_factory=list, description="Roster rows")
    count: int = Field(..., ge=0, description="Number of enrolled students")
    status: str = Field(..., description="Outcome of the most recent operation")
    can_undo: bool = Field(..., description="Whether an undo snapshot is available")
    busy: bool = Field(..., description="Whether a recording is in progress")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "students": [
                    {"position": 0, "name": "Ada", "stars": 3, "fingerprint_count": 10}
                ],
                "count": 1,
                "status": "Star awarded to Ada",
                "can_undo": True,
                "busy": False,
            }
        }
    )


class OperationResponse(BaseModel):
    """Response from any roster mutation endpoint."""
    success: bool = Field(..., description="Whether the operation changed the roster")
    status: str = Field(..., description="Human-readable outcome")
    name: Optional[str] = Field(None, description="Student the operation applied to")
    roster: RosterResponse = Field(..., description="Roster after the operation")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "status": "Enrolled Ada",
                "name": "Ada",
                "roster": {
                    "students": [
                        {"position": 0, "name": "Ada", "stars": 0, "fingerprint_count": 10}
                    ],
                    "count": 1,
                    "status": "Enrolled Ada",
                    "can_undo": True,
                    "busy": False,
                },
            }
        }
    )


class ErrorResponse(BaseModel):
    """Error response from any endpoint."""
    error: str = Field(..., description="Error message describing what went wrong")


def build_roster_response(
    service: IRosterService,
    views: Optional[List[IdentityView]] = None,
) -> RosterResponse:
    rows = [IdentityRow.from_view(v) for v in (views if views is not None else service.view())]
    return RosterResponse(
        students=rows,
        count=len(rows),
        status=service.last_status,
        can_undo=service.can_undo,
        busy=service.busy,
    )


def build_operation_response(service: IRosterService, result: OperationResult) -> OperationResponse:
    return OperationResponse(
        success=result.success,
        status=result.status,
        name=result.name,
        roster=build_roster_response(service),
    )
