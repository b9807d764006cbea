"""HTTP client that reports kiosk events to the gallery server."""

import logging
from dataclasses import dataclass

import httpx

from wedding_gallery.domain.sharing import ShareEvent
from wedding_gallery.services.sharing import ShareTracker

_logger = logging.getLogger(__name__)


@dataclass
class HttpxAnalyticsClient(ShareTracker):
    """Fire-and-forget analytics reporting implemented with httpx."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 10.0

    @classmethod
    def create(cls, base_url: str, timeout: float = 10.0) -> "HttpxAnalyticsClient":
        """Create an analytics client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def record_share(self, event: ShareEvent) -> None:
        """Post a share event; failures are logged, never raised."""
        await self._post("/api/analytics/share", event.to_dict())

    async def record_frame_used(self, photo_id: str, frame_id: str) -> None:
        """Post a frame selection event; failures are logged, never raised."""
        await self._post(
            "/api/analytics/frame-used", {"photoId": photo_id, "frameId": frame_id}
        )

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()

    async def _post(self, path: str, payload: dict[str, object]) -> None:
        try:
            response = await self.http_client.post(
                f"{self.base_url}{path}", json=payload, timeout=self.timeout
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            _logger.warning("Analytics post to %s failed: %s", path, exc)
