"""Supabase repository for analytics events."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from wedding_gallery.domain.analytics import FrameUsedEventIn, ShareEventIn
from wedding_gallery.services.analytics import AnalyticsRepository

_SHARE_COLUMNS = (
    "photo_id, platform, target, message, frame_id, shared_image, created_at"
)


@dataclass
class SupabaseAnalyticsRepository(AnalyticsRepository):
    """Supabase-backed analytics repository."""

    client: Client

    def add_share_event(self, event: ShareEventIn) -> None:
        """Insert a share event row."""
        self.client.table("share_events").insert(
            {
                "photo_id": event.photo_id,
                "platform": event.platform,
                "target": event.target,
                "message": event.message,
                "frame_id": event.frame_id,
                "shared_image": event.shared_image,
                "created_at": event.timestamp.isoformat(),
            }
        ).execute()

    def add_frame_event(self, event: FrameUsedEventIn) -> None:
        """Insert a frame selection row."""
        self.client.table("frame_events").insert(
            {
                "photo_id": event.photo_id,
                "frame_id": event.frame_id,
                "created_at": event.timestamp.isoformat(),
            }
        ).execute()

    def list_share_events(self, limit: int | None = None) -> list[ShareEventIn]:
        """Return share events, newest first."""
        query = (
            self.client.table("share_events")
            .select(_SHARE_COLUMNS)
            .order("created_at", desc=True)
        )
        if limit is not None:
            query = query.limit(limit)
        response = query.execute()
        return [
            ShareEventIn(
                photo_id=str(row.get("photo_id", "")),
                platform=str(row.get("platform", "")),
                target=row.get("target"),
                message=str(row.get("message") or ""),
                frame_id=row.get("frame_id"),
                shared_image=bool(row.get("shared_image", False)),
                timestamp=_parse_created_at(row.get("created_at")),
            )
            for row in response.data or []
        ]

    def list_frame_events(self, limit: int | None = None) -> list[FrameUsedEventIn]:
        """Return frame selection events, newest first."""
        query = (
            self.client.table("frame_events")
            .select("photo_id, frame_id, created_at")
            .order("created_at", desc=True)
        )
        if limit is not None:
            query = query.limit(limit)
        response = query.execute()
        return [
            FrameUsedEventIn(
                photo_id=str(row.get("photo_id", "")),
                frame_id=str(row.get("frame_id", "")),
                timestamp=_parse_created_at(row.get("created_at")),
            )
            for row in response.data or []
        ]


def _parse_created_at(value: object) -> datetime:
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return datetime.min.replace(tzinfo=UTC)
