"""Frame catalog and canvas layout endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Query, Request

from wedding_gallery.domain.compositing import PRESETS, Preset
from wedding_gallery.domain.geometry import Size, compute_layout, unframed_layout

if TYPE_CHECKING:
    from wedding_gallery.containers import AppContainer

router = APIRouter(prefix="/api/frames", tags=["frames"])

PHOTO_PLACEHOLDER = "photo"


@router.get("")
async def list_frames(request: Request) -> dict[str, object]:
    """Return the frame catalog in display order."""
    container: AppContainer = request.app.state.container
    return {
        "success": True,
        "frames": [frame.to_dict() for frame in container.catalog.list_frames()],
    }


@router.get("/{frame_id}/layout")
async def frame_layout(
    frame_id: str,
    request: Request,
    photo_width: int = Query(gt=0),
    photo_height: int = Query(gt=0),
    preset: Preset = Preset.SHARE,
) -> dict[str, object]:
    """Return the canvas draw plan for compositing a photo in the browser.

    The photo's ``src`` is the placeholder ``"photo"``; the client swaps in
    its own image.
    """
    container: AppContainer = request.app.state.container
    frame = container.catalog.get_frame(frame_id)
    options = PRESETS[preset]
    photo = Size(width=photo_width, height=photo_height)
    if frame.is_passthrough:
        layout = unframed_layout(photo)
    else:
        frame_size = await container.compositor.frame_size(frame)
        layout = compute_layout(frame_size, photo, options.scale_factor)
    plan = container.canvas_renderer.plan(
        layout, PHOTO_PLACEHOLDER, frame.asset_url, options
    )
    return {"success": True, "frameId": frame.id.value, **plan.to_dict()}
