"""HTTP image download client."""

from dataclasses import dataclass

import httpx

from wedding_gallery.services.compositor import ImageFetcher


@dataclass
class HttpxImageFetcher(ImageFetcher):
    """Image fetcher using httpx."""

    http_client: httpx.AsyncClient
    timeout: float = 15.0

    @classmethod
    def create(cls, timeout: float = 15.0) -> "HttpxImageFetcher":
        """Create a fetcher with a managed httpx session."""
        return cls(
            http_client=httpx.AsyncClient(follow_redirects=True), timeout=timeout
        )

    async def fetch_bytes(self, url: str) -> bytes:
        """Download an image and return its bytes."""
        response = await self.http_client.get(url, timeout=self.timeout)
        response.raise_for_status()
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
