"""Gallery listing, detail and framed download endpoints."""

from __future__ import annotations

from html import escape
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, Response

from wedding_gallery.domain.compositing import Preset
from wedding_gallery.domain.frames import FrameId

if TYPE_CHECKING:
    from wedding_gallery.containers import AppContainer

router = APIRouter(tags=["gallery"])


@router.get("/photos")
@router.get("/api/photos")
async def list_photos(request: Request) -> list[dict[str, object]]:
    """Return every gallery photo, newest first."""
    container: AppContainer = request.app.state.container
    return [record.to_dict() for record in container.gallery_service.list_photos()]


@router.get("/api/photos/{photo_id}")
async def photo_detail(photo_id: str, request: Request) -> dict[str, object]:
    """Return one photo resolved through its stored variants."""
    container: AppContainer = request.app.state.container
    return container.gallery_service.get_photo(photo_id).to_dict()


@router.get("/api/photos/{photo_id}/framed")
async def framed_photo(
    photo_id: str,
    request: Request,
    frame: str = FrameId.STANDARD.value,
    preset: Preset = Preset.DOWNLOAD,
) -> Response:
    """Return the photo composited under a catalog frame as an image."""
    container: AppContainer = request.app.state.container
    result = await container.gallery_service.render_framed(photo_id, frame, preset)
    headers = {"X-Frame-Id": result.frame_id.value}
    if result.fallback_reason:
        headers["X-Frame-Fallback"] = result.fallback_reason
    return Response(content=result.data, media_type=result.media_type, headers=headers)


@router.get("/photo/{photo_id}", response_class=HTMLResponse)
async def photo_page(photo_id: str, request: Request) -> HTMLResponse:
    """Minimal shareable page for one photo."""
    container: AppContainer = request.app.state.container
    record = container.gallery_service.get_photo(photo_id)
    return HTMLResponse(_PHOTO_PAGE_HTML.format(src=escape(record.url, quote=True)))


_PHOTO_PAGE_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Wedding Photo</title>
    <style>
      body {{ font-family: Arial, sans-serif; max-width: 1200px; margin: 0 auto;
        padding: 20px; text-align: center; }}
      .photo-container {{ margin-top: 30px; }}
      img {{ max-width: 100%; box-shadow: 0 4px 8px rgba(0, 0, 0, 0.1); }}
    </style>
  </head>
  <body>
    <h1>Wedding Photo</h1>
    <div class="photo-container">
      <img src="{src}" alt="Wedding Photo" />
    </div>
    <p><a href="/">View All Photos</a></p>
  </body>
</html>
"""
