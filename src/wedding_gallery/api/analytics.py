"""Analytics sink and admin summary endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request

from wedding_gallery.api.auth import require_api_key
from wedding_gallery.domain.analytics import (  # noqa: TC001
    FrameUsedEventIn,
    ShareEventIn,
)

if TYPE_CHECKING:
    from wedding_gallery.containers import AppContainer

router = APIRouter(prefix="/api", tags=["analytics"])


@router.post("/analytics/share")
async def record_share(event: ShareEventIn, request: Request) -> dict[str, bool]:
    """Record a share attempt. Always succeeds from the client's view."""
    container: AppContainer = request.app.state.container
    container.analytics_service.record_share(event)
    return {"success": True}


@router.post("/analytics/frame-used")
async def record_frame_used(
    event: FrameUsedEventIn, request: Request
) -> dict[str, bool]:
    """Record which frame a guest picked."""
    container: AppContainer = request.app.state.container
    container.analytics_service.record_frame_used(event)
    return {"success": True}


@router.get("/admin/analytics-summary", dependencies=[Depends(require_api_key)])
async def analytics_summary(request: Request) -> dict[str, object]:
    """Return totals, shares by channel, popular frames and recent activity."""
    container: AppContainer = request.app.state.container
    total_photos = len(container.gallery_service.list_photos())
    summary = container.analytics_service.summary(total_photos)
    return {"success": True, **summary.model_dump(by_alias=True)}
