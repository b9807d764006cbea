"""Models for analytics events and summaries."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


def _now() -> datetime:
    return datetime.now(tz=UTC)


class ShareEventIn(BaseModel):
    """Share event body posted by clients."""

    model_config = ConfigDict(populate_by_name=True)

    photo_id: str = Field(alias="photoId")
    platform: str
    target: str | None = None
    message: str = ""
    frame_id: str | None = Field(default=None, alias="frameId")
    shared_image: bool = Field(default=False, alias="sharedImage")
    timestamp: datetime = Field(default_factory=_now)


class FrameUsedEventIn(BaseModel):
    """Frame selection event body posted by clients."""

    model_config = ConfigDict(populate_by_name=True)

    photo_id: str = Field(alias="photoId")
    frame_id: str = Field(alias="frameId")
    timestamp: datetime = Field(default_factory=_now)


class AnalyticsSummary(BaseModel):
    """Aggregates shown on the admin dashboard."""

    total_photos: int = Field(serialization_alias="totalPhotos")
    total_shares: int = Field(serialization_alias="totalShares")
    total_frame_uses: int = Field(serialization_alias="totalFrameUses")
    shares_by_channel: dict[str, int] = Field(serialization_alias="sharesByChannel")
    popular_frames: dict[str, int] = Field(serialization_alias="popularFrames")
    recent_activity: list[dict[str, object]] = Field(
        serialization_alias="recentActivity"
    )
