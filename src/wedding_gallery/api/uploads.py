"""Photo upload endpoint."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException

from wedding_gallery.api.auth import require_api_key
from wedding_gallery.errors import (
    CompositingError,
    GalleryError,
    UploadValidationError,
)
from wedding_gallery.services.uploads import UploadedFile

if TYPE_CHECKING:
    from wedding_gallery.containers import AppContainer

router = APIRouter(tags=["uploads"])
_logger = logging.getLogger(__name__)

MAX_UPLOAD_FILES = 2


@router.post("/api/upload-photo", dependencies=[Depends(require_api_key)])
async def upload_photo(request: Request) -> dict[str, object]:
    """Accept a multipart ``photo`` with optional ``thumbnail`` and ``metadata``.

    The body is parsed here rather than through form parameters so that the
    API key dependency runs before any of it is read.
    """
    container: AppContainer = request.app.state.container
    limit = container.settings.max_upload_bytes
    try:
        form = await request.form(max_files=MAX_UPLOAD_FILES)
    except HTTPException as exc:
        raise UploadValidationError(str(exc.detail)) from exc
    try:
        photo = await read_upload(form.get("photo"), limit)
        thumbnail = await read_upload(form.get("thumbnail"), limit)
        metadata = form.get("metadata")
        receipt = await container.upload_service.accept_upload(
            photo,
            thumbnail,
            metadata if isinstance(metadata, str) else None,
        )
    except GalleryError:
        raise
    except Exception as exc:
        _logger.exception("Upload or framing error")
        raise CompositingError("Server error during upload or framing") from exc
    finally:
        await form.close()
    message = (
        "Photo uploaded and framed successfully"
        if receipt.framed_url
        else "Photo uploaded successfully"
    )
    return {
        "success": True,
        "photoId": receipt.photo_id,
        "framedUrl": receipt.framed_url,
        "message": message,
    }


async def read_upload(value: object, limit: int) -> UploadedFile | None:
    """Read a multipart file field, enforcing the per-file size limit."""
    if not isinstance(value, UploadFile):
        return None
    data = await value.read(limit + 1)
    if len(data) > limit:
        raise UploadValidationError("File too large")
    return UploadedFile(
        filename=value.filename or "upload.jpg",
        data=data,
        content_type=value.content_type,
    )
