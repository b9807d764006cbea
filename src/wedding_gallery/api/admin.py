"""Admin endpoints for managing the server frame."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request
from starlette.exceptions import HTTPException

from wedding_gallery.api.auth import require_api_key
from wedding_gallery.api.uploads import read_upload
from wedding_gallery.errors import (
    CompositingError,
    GalleryError,
    UploadValidationError,
)

if TYPE_CHECKING:
    from wedding_gallery.containers import AppContainer

router = APIRouter(prefix="/api/admin", tags=["admin"])
_logger = logging.getLogger(__name__)


@router.post("/overlays", dependencies=[Depends(require_api_key)])
async def upload_overlay(request: Request) -> dict[str, object]:
    """Replace the frame applied to new uploads with a PNG ``overlay``."""
    container: AppContainer = request.app.state.container
    try:
        form = await request.form(max_files=1)
    except HTTPException as exc:
        raise UploadValidationError(str(exc.detail)) from exc
    try:
        overlay = await read_upload(
            form.get("overlay"), container.settings.max_upload_bytes
        )
        frame_url = await container.upload_service.install_frame(overlay)
    except GalleryError:
        raise
    except Exception as exc:
        _logger.exception("Frame upload error")
        raise CompositingError("Server error while saving frame") from exc
    finally:
        await form.close()
    return {
        "success": True,
        "frameUrl": frame_url,
        "message": "Frame uploaded successfully",
    }
