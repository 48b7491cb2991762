"""Roster router - REST endpoints for enrollment, star awards and undo."""

# Annotations stay eagerly evaluated here; the rate-limit wrapper resolves
# string annotations against slowapi's globals, not this module's.
import logging
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, File, Form, Path, Query, Request, UploadFile
from fastapi.responses import JSONResponse

from api.dependencies import get_roster_service, limiter
from api.schemas.roster_schemas import (
    ErrorResponse,
    OperationResponse,
    RosterResponse,
    build_operation_response,
    build_roster_response,
)
from app.config import Config
from services.audio.capture import ClipCapture
from services.audio.streaming_upload import StreamingUploadError, read_upload_bytes, read_uploads
from services.interfaces.i_roster_service import IRosterService

router = APIRouter(prefix="/roster", tags=["roster"])
logger = logging.getLogger(__name__)

_BUSY_RESPONSE = {409: {"model": ErrorResponse, "description": "A recording is already in progress"}}
_UPLOAD_RESPONSE = {413: {"model": ErrorResponse, "description": "Audio clip too large"}}


def _busy() -> JSONResponse:
    return JSONResponse(content={"error": "Recording already in progress"}, status_code=409)


def _too_large(exc: StreamingUploadError) -> JSONResponse:
    logger.warning(f"Upload rejected: {exc}")
    return JSONResponse(content={"error": str(exc)}, status_code=413)


@router.get(
    "",
    summary="Get roster",
    response_model=RosterResponse,
)
async def get_roster(
    sort: Optional[Literal["name", "stars"]] = Query(None, description="Sort column"),
    order: Literal["asc", "desc"] = Query("asc", description="Sort direction"),
    service: IRosterService = Depends(get_roster_service),
):
    """Return the roster, optionally sorted for display.

    Sorting never changes roster positions; mutation endpoints keep using
    the positions reported here.
    """
    views = service.sorted_view(sort, descending=order == "desc") if sort else None
    return build_roster_response(service, views)


@router.post(
    "/enroll",
    summary="Enroll student",
    description=(
        f"Record {Config.MAX_FINGERPRINTS} voice samples for a student. "
        "Existing students keep their most recent fingerprints up to the limit. "
        "Nothing is stored unless every sample is usable."
    ),
    response_model=OperationResponse,
    responses={**_BUSY_RESPONSE, **_UPLOAD_RESPONSE},
)
async def enroll(
    name: str = Form("", description="Student name"),
    samples: Optional[List[UploadFile]] = File(None, description="Voice clips, one per sample (WAV or 16 kHz PCM)"),
    service: IRosterService = Depends(get_roster_service),
):
    if service.busy:
        return _busy()
    try:
        clips = await read_uploads(samples or [], max_size=Config.MAX_AUDIO_BYTES)
    except StreamingUploadError as sue:
        return _too_large(sue)

    result = await service.enroll(name, ClipCapture(clips))
    return build_operation_response(service, result)


@router.post(
    "/{position}/re-enroll",
    summary="Re-record student",
    description=f"Replace all fingerprints of a student with {Config.MAX_FINGERPRINTS} new samples.",
    response_model=OperationResponse,
    responses={**_BUSY_RESPONSE, **_UPLOAD_RESPONSE},
)
async def re_enroll(
    position: int = Path(..., ge=0, description="Roster position"),
    samples: Optional[List[UploadFile]] = File(None, description="Voice clips, one per sample"),
    service: IRosterService = Depends(get_roster_service),
):
    if service.busy:
        return _busy()
    try:
        clips = await read_uploads(samples or [], max_size=Config.MAX_AUDIO_BYTES)
    except StreamingUploadError as sue:
        return _too_large(sue)

    result = await service.re_enroll(position, ClipCapture(clips))
    return build_operation_response(service, result)


@router.post(
    "/award",
    summary="Identify speaker and award a star",
    response_model=OperationResponse,
    responses={**_BUSY_RESPONSE, **_UPLOAD_RESPONSE},
)
@limiter.limit(Config.AWARD_RATE_LIMIT)
async def award_star(
    request: Request,
    sample: Optional[UploadFile] = File(None, description="One voice clip"),
    service: IRosterService = Depends(get_roster_service),
):
    if service.busy:
        return _busy()
    clips: List[bytes] = []
    if sample is not None:
        try:
            clips.append(await read_upload_bytes(sample, max_size=Config.MAX_AUDIO_BYTES))
        except StreamingUploadError as sue:
            return _too_large(sue)

    result = await service.award_star(ClipCapture(clips))
    return build_operation_response(service, result)


@router.post(
    "/{position}/stars/increment",
    summary="Add a star",
    response_model=OperationResponse,
)
async def add_star(
    position: int = Path(..., ge=0),
    service: IRosterService = Depends(get_roster_service),
):
    return build_operation_response(service, service.add_star(position))


@router.post(
    "/{position}/stars/decrement",
    summary="Remove a star (never below zero)",
    response_model=OperationResponse,
)
async def remove_star(
    position: int = Path(..., ge=0),
    service: IRosterService = Depends(get_roster_service),
):
    return build_operation_response(service, service.remove_star(position))


@router.delete(
    "/{position}",
    summary="Drop student",
    response_model=OperationResponse,
)
async def drop(
    position: int = Path(..., ge=0),
    service: IRosterService = Depends(get_roster_service),
):
    return build_operation_response(service, service.drop(position))


@router.post(
    "/stars/reset",
    summary="Clear all stars",
    response_model=OperationResponse,
)
async def reset_stars(service: IRosterService = Depends(get_roster_service)):
    return build_operation_response(service, service.reset_stars())


@router.post(
    "/undo",
    summary="Undo the last change",
    response_model=OperationResponse,
)
async def undo(service: IRosterService = Depends(get_roster_service)):
    return build_operation_response(service, service.undo())
