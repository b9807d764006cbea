"""Analytics sink for share and frame-selection events."""

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from wedding_gallery.domain.analytics import (
    AnalyticsSummary,
    FrameUsedEventIn,
    ShareEventIn,
)
from wedding_gallery.domain.sharing import MAX_MESSAGE_LENGTH

_logger = logging.getLogger(__name__)


class AnalyticsRepository(Protocol):
    """Persistence interface for analytics events."""

    def add_share_event(self, event: ShareEventIn) -> None:
        """Store a share event."""

    def add_frame_event(self, event: FrameUsedEventIn) -> None:
        """Store a frame selection event."""

    def list_share_events(self, limit: int | None = None) -> list[ShareEventIn]:
        """Return share events, newest first."""

    def list_frame_events(self, limit: int | None = None) -> list[FrameUsedEventIn]:
        """Return frame events, newest first."""


@dataclass
class AnalyticsService:
    """Records events without ever failing the caller."""

    repository: AnalyticsRepository
    recent_limit: int = 20

    def record_share(self, event: ShareEventIn) -> None:
        """Store a share event; storage failures are logged and dropped."""
        trimmed = event.model_copy(
            update={"message": event.message[:MAX_MESSAGE_LENGTH]}
        )
        try:
            self.repository.add_share_event(trimmed)
        except Exception:
            _logger.exception("Failed to record share event for %s", event.photo_id)

    def record_frame_used(self, event: FrameUsedEventIn) -> None:
        """Store a frame selection event; storage failures are logged and dropped."""
        try:
            self.repository.add_frame_event(event)
        except Exception:
            _logger.exception("Failed to record frame event for %s", event.photo_id)

    def summary(self, total_photos: int) -> AnalyticsSummary:
        """Aggregate stored events for the admin dashboard."""
        shares = self.repository.list_share_events()
        frames = self.repository.list_frame_events()
        activity: list[tuple[datetime, dict[str, object]]] = [
            (
                _as_utc(event.timestamp),
                {
                    "type": "share",
                    "photoId": event.photo_id,
                    "platform": event.platform,
                    "timestamp": event.timestamp.isoformat(),
                },
            )
            for event in shares
        ]
        activity.extend(
            (
                _as_utc(event.timestamp),
                {
                    "type": "frame",
                    "photoId": event.photo_id,
                    "frameId": event.frame_id,
                    "timestamp": event.timestamp.isoformat(),
                },
            )
            for event in frames
        )
        activity.sort(key=lambda item: item[0], reverse=True)
        return AnalyticsSummary(
            total_photos=total_photos,
            total_shares=len(shares),
            total_frame_uses=len(frames),
            shares_by_channel=dict(Counter(event.platform for event in shares)),
            popular_frames=dict(
                Counter(event.frame_id for event in frames).most_common()
            ),
            recent_activity=[entry for _, entry in activity[: self.recent_limit]],
        )


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)
