"""Chunked upload reading with a size cap.

Reads an uploaded clip chunk by chunk so an oversized upload is rejected
as soon as it crosses the limit instead of after it is fully buffered.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional, Sequence

if TYPE_CHECKING:
    from fastapi import UploadFile

logger = logging.getLogger(__name__)

# Default chunk size for streaming (64KB - balanced for network I/O)
DEFAULT_CHUNK_SIZE = 64 * 1024


class StreamingUploadError(Exception):
    """Raised when streaming upload operations fail."""
    pass


async def read_upload_bytes(
    upload_file: "UploadFile",
    max_size: Optional[int] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> bytes:
    """Read an uploaded file into memory, enforcing ``max_size``.

    Args:
        upload_file: FastAPI UploadFile object
        max_size: Maximum allowed file size in bytes (None = no limit)
        chunk_size: Size of chunks to read

    Returns:
        The uploaded bytes (possibly empty)

    Raises:
        StreamingUploadError: If upload exceeds max_size
    """
    chunks: List[bytes] = []
    total_bytes = 0
    while True:
        chunk = await upload_file.read(chunk_size)
        if not chunk:
            break
        total_bytes += len(chunk)
        if max_size and total_bytes > max_size:
            raise StreamingUploadError(
                f"Upload {upload_file.filename!r} exceeds maximum size of {max_size} bytes"
            )
        chunks.append(chunk)

    logger.debug(
        "Upload read | filename=%s | size=%d bytes", upload_file.filename, total_bytes
    )
    return b"".join(chunks)


async def read_uploads(
    upload_files: Sequence["UploadFile"],
    max_size: Optional[int] = None,
) -> List[bytes]:
    """Read several uploads in order, each subject to ``max_size``."""
    return [await read_upload_bytes(f, max_size=max_size) for f in upload_files]
