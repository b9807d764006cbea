"""Frame compositing service.

The compositor loads a base photo and a frame asset, asks the shared geometry
module where everything goes, and hands the layout to a rendering back end.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

from wedding_gallery.domain.compositing import (
    ASSET_UNAVAILABLE,
    CompositeOptions,
    CompositeResult,
    ImageSource,
)
from wedding_gallery.domain.frames import Frame, FrameId
from wedding_gallery.domain.geometry import (
    CompositeLayout,
    Size,
    compute_layout,
    unframed_layout,
)
from wedding_gallery.errors import (
    AssetUnavailableError,
    GalleryError,
    PhotoUnavailableError,
)
from wedding_gallery.services.cache import Cache
from wedding_gallery.services.frames import FrameCatalog

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedImage:
    """Raw bytes plus the back end's decoded handle."""

    data: bytes
    image: object
    size: Size
    media_type: str


class Renderer(Protocol):
    """Rendering back end that turns a layout into encoded bytes."""

    def decode(self, data: bytes) -> LoadedImage:
        """Fully decode image bytes; raise ValueError when they are not an image."""

    def render(
        self,
        layout: CompositeLayout,
        photo: LoadedImage,
        frame: LoadedImage | None,
        options: CompositeOptions,
    ) -> bytes:
        """Paint background, photo and frame in that order and encode as JPEG."""


class ImageFetcher(Protocol):
    """Interface for downloading remote images."""

    async def fetch_bytes(self, url: str) -> bytes:
        """Download an image and return its bytes."""


@dataclass
class Compositor:
    """Composites photos beneath frame overlays."""

    renderer: Renderer
    catalog: FrameCatalog
    fetcher: ImageFetcher | None = None
    cache: Cache | None = None

    async def composite(
        self,
        base: ImageSource,
        frame: Frame | None,
        options: CompositeOptions | None = None,
    ) -> CompositeResult:
        """Composite ``base`` under ``frame``; the sentinel frame skips it."""
        resolved = options or CompositeOptions()
        photo = await self.load(base, PhotoUnavailableError)
        if frame is None or frame.is_passthrough:
            return await self._unframed(photo, resolved)
        asset_path = self.catalog.asset_path(frame)
        if asset_path is None:
            raise AssetUnavailableError(f"Frame {frame.id} has no asset")
        return await self._framed(
            photo, ImageSource.from_path(asset_path), frame.id, resolved
        )

    async def composite_asset(
        self,
        base: ImageSource,
        asset: ImageSource,
        options: CompositeOptions | None = None,
        frame_id: FrameId = FrameId.STANDARD,
    ) -> CompositeResult:
        """Composite ``base`` under an explicit frame asset outside the catalog."""
        resolved = options or CompositeOptions()
        photo = await self.load(base, PhotoUnavailableError)
        return await self._framed(photo, asset, frame_id, resolved)

    async def composite_or_fallback(
        self,
        base: ImageSource,
        frame: Frame | None,
        options: CompositeOptions | None = None,
    ) -> CompositeResult:
        """Like :meth:`composite` but fall back to the unframed photo when the
        frame asset cannot be used. Base photo failures still raise."""
        resolved = options or CompositeOptions()
        try:
            return await self.composite(base, frame, resolved)
        except AssetUnavailableError as exc:
            _logger.warning(
                "Frame unavailable, using unframed photo: %s", exc.message
            )
            photo = await self.load(base, PhotoUnavailableError)
            unframed = await self._unframed(photo, resolved)
            return CompositeResult(
                data=unframed.data,
                width=unframed.width,
                height=unframed.height,
                media_type=unframed.media_type,
                frame_id=FrameId.NONE,
                layout=unframed.layout,
                fallback_reason=ASSET_UNAVAILABLE,
            )

    async def frame_size(self, frame: Frame) -> Size:
        """Return the pixel size of a frame asset."""
        asset_path = self.catalog.asset_path(frame)
        if asset_path is None:
            raise AssetUnavailableError(f"Frame {frame.id} has no asset")
        loaded = await self.load(
            ImageSource.from_path(asset_path), AssetUnavailableError
        )
        return loaded.size

    async def load(
        self,
        source: ImageSource,
        error_type: type[GalleryError] = PhotoUnavailableError,
    ) -> LoadedImage:
        """Load and decode an image, consulting the cache for URL and path sources."""
        key = await _versioned_key(source)
        if key is not None and self.cache is not None:
            cached = self.cache.get(key)
            if isinstance(cached, LoadedImage):
                return cached
        data = await self._read(source, error_type)
        try:
            loaded = await asyncio.to_thread(self.renderer.decode, data)
        except ValueError as exc:
            raise error_type(f"Cannot decode image {source.describe()}") from exc
        if key is not None and self.cache is not None:
            self.cache.set(key, loaded)
        return loaded

    def clear_cache(self) -> None:
        """Release every cached decoded image."""
        if self.cache is not None:
            self.cache.clear()

    async def _read(
        self, source: ImageSource, error_type: type[GalleryError]
    ) -> bytes:
        if source.data is not None:
            return source.data
        if source.path is not None:
            try:
                return await asyncio.to_thread(source.path.read_bytes)
            except OSError as exc:
                raise error_type(f"Cannot read image {source.path}") from exc
        if self.fetcher is None:
            raise error_type(f"No fetcher configured for {source.url}")
        try:
            return await self.fetcher.fetch_bytes(str(source.url))
        except Exception as exc:
            raise error_type(f"Cannot fetch image {source.url}") from exc

    async def _framed(
        self,
        photo: LoadedImage,
        asset: ImageSource,
        frame_id: FrameId,
        options: CompositeOptions,
    ) -> CompositeResult:
        frame_image = await self.load(asset, AssetUnavailableError)
        layout = compute_layout(frame_image.size, photo.size, options.scale_factor)
        data = await asyncio.to_thread(
            self.renderer.render, layout, photo, frame_image, options
        )
        return CompositeResult(
            data=data,
            width=layout.canvas.width,
            height=layout.canvas.height,
            media_type="image/jpeg",
            frame_id=frame_id,
            layout=layout,
        )

    async def _unframed(
        self, photo: LoadedImage, options: CompositeOptions
    ) -> CompositeResult:
        if options.passthrough_without_frame and not options.reencode:
            return CompositeResult(
                data=photo.data,
                width=photo.size.width,
                height=photo.size.height,
                media_type=photo.media_type,
                frame_id=FrameId.NONE,
            )
        layout = unframed_layout(photo.size)
        data = await asyncio.to_thread(
            self.renderer.render, layout, photo, None, options
        )
        return CompositeResult(
            data=data,
            width=photo.size.width,
            height=photo.size.height,
            media_type="image/jpeg",
            frame_id=FrameId.NONE,
            layout=layout,
        )


async def _versioned_key(source: ImageSource) -> str | None:
    # Files are keyed by mtime too so a replaced asset is decoded again.
    key = source.cache_key
    if key is None or source.path is None:
        return key
    try:
        stat = await asyncio.to_thread(source.path.stat)
    except OSError:
        return None
    return f"{key}@{stat.st_mtime_ns}"
