"""Upload intake: persist a guest photo and frame it."""

import asyncio
import json
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from wedding_gallery.domain.compositing import CompositeOptions, ImageSource
from wedding_gallery.domain.geometry import Size
from wedding_gallery.domain.photos import (
    UploadReceipt,
    framed_filename,
    sanitize_filename,
    to_millis,
)
from wedding_gallery.errors import (
    CompositingError,
    GalleryError,
    UploadValidationError,
)
from wedding_gallery.services.compositor import Compositor

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredFile:
    """A stored photo file and its modification time in epoch millis."""

    filename: str
    modified_at: int


class PhotoStorage(Protocol):
    """Durable storage for raw photos, composites and thumbnails."""

    def save_photo(self, filename: str, data: bytes) -> None:
        """Write a photo, replacing any file with the same name."""

    def read_photo(self, filename: str) -> bytes | None:
        """Return a photo's bytes, if present."""

    def photo_exists(self, filename: str) -> bool:
        """Return true when a photo file exists."""

    def list_photos(self) -> list[StoredFile]:
        """Return every stored photo file."""

    def save_thumbnail(self, filename: str, data: bytes) -> None:
        """Write a thumbnail, replacing any file with the same name."""


class MetadataRepository(Protocol):
    """Persistence interface for per-photo metadata sidecars."""

    def save(self, photo_id: str, metadata: dict[str, object]) -> None:
        """Store the sidecar record for a photo."""

    def get(self, photo_id: str) -> dict[str, object] | None:
        """Return the sidecar record for a photo, if present."""


class Thumbnailer(Protocol):
    """Produces cover-fit thumbnails."""

    def thumbnail(self, data: bytes, size: Size, quality: int) -> bytes:
        """Return encoded thumbnail bytes."""


@dataclass(frozen=True)
class UploadedFile:
    """A file received in a multipart upload."""

    filename: str
    data: bytes
    content_type: str | None = None


@dataclass
class UploadService:
    """Accepts uploads and produces the framed copy."""

    storage: PhotoStorage
    metadata_repository: MetadataRepository
    compositor: Compositor
    thumbnailer: Thumbnailer
    frame_filename: str = "wedding-frame.png"
    frame_options: CompositeOptions = CompositeOptions(scale_factor=0.85, quality=90)
    thumbnail_size: Size = Size(width=300, height=200)
    thumbnail_quality: int = 80

    async def accept_upload(
        self,
        photo: UploadedFile | None,
        thumbnail: UploadedFile | None = None,
        metadata_raw: str | None = None,
    ) -> UploadReceipt:
        """Store the photo, its metadata and thumbnail, then frame it."""
        if photo is None or not photo.data:
            raise UploadValidationError("No photo uploaded")
        filename = _safe_name(photo.filename)
        thumbnail = _usable_thumbnail(thumbnail)
        self.storage.save_photo(filename, photo.data)

        metadata = parse_metadata(metadata_raw)
        photo_id = _photo_id(metadata, filename)
        self.metadata_repository.save(
            photo_id,
            {
                **metadata,
                "photoId": photo_id,
                "serverTimestamp": to_millis(datetime.now(tz=UTC)),
            },
        )

        thumbnail_filename = await self._store_thumbnail(
            filename, photo.data, thumbnail
        )
        framed_url = await self._apply_frame(filename, photo.data)
        _logger.info(
            "Accepted upload: photo_id=%s framed=%s", photo_id, framed_url is not None
        )
        return UploadReceipt(
            photo_id=photo_id,
            filename=filename,
            framed_url=framed_url,
            thumbnail_filename=thumbnail_filename,
        )

    async def install_frame(self, overlay: UploadedFile | None) -> str:
        """Replace the server frame with an uploaded PNG overlay."""
        if overlay is None or not overlay.data:
            raise UploadValidationError("No frame uploaded")
        try:
            loaded = await asyncio.to_thread(
                self.compositor.renderer.decode, overlay.data
            )
        except ValueError as exc:
            raise UploadValidationError("Frame must be a PNG image") from exc
        if loaded.media_type != "image/png":
            raise UploadValidationError("Frame must be a PNG image")
        self.storage.save_photo(self.frame_filename, overlay.data)
        self.compositor.clear_cache()
        _logger.info(
            "Installed server frame %s (%dx%d)",
            self.frame_filename,
            loaded.size.width,
            loaded.size.height,
        )
        return f"/photos/{self.frame_filename}"

    async def _store_thumbnail(
        self, filename: str, photo_data: bytes, thumbnail: UploadedFile | None
    ) -> str | None:
        if thumbnail is not None:
            thumbnail_filename, data = thumbnail.filename, thumbnail.data
        else:
            thumbnail_filename = f"thumb_{filename}"
            try:
                data = await asyncio.to_thread(
                    self.thumbnailer.thumbnail,
                    photo_data,
                    self.thumbnail_size,
                    self.thumbnail_quality,
                )
            except ValueError:
                _logger.warning("Could not generate thumbnail for %s", filename)
                return None
        try:
            self.storage.save_thumbnail(thumbnail_filename, data)
        except OSError:
            _logger.exception("Could not store thumbnail %s", thumbnail_filename)
            return None
        return thumbnail_filename

    async def _apply_frame(self, filename: str, photo_data: bytes) -> str | None:
        frame_data = self.storage.read_photo(self.frame_filename)
        if frame_data is None:
            _logger.info(
                "No server frame at %s, keeping raw upload", self.frame_filename
            )
            return None
        output_filename = framed_filename(filename)
        try:
            result = await self.compositor.composite_asset(
                ImageSource.from_bytes(photo_data),
                ImageSource.from_bytes(frame_data),
                self.frame_options,
            )
        except GalleryError as exc:
            _logger.exception("Failed to frame upload %s", filename)
            raise CompositingError("Server error during upload or framing") from exc
        self.storage.save_photo(output_filename, result.data)
        return f"/photos/{output_filename}"


def parse_metadata(raw: str | None) -> dict[str, object]:
    """Parse the metadata field; bad JSON is logged and treated as empty."""
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        _logger.warning("Invalid metadata JSON: %s", exc)
        return {}
    if not isinstance(parsed, dict):
        _logger.warning("Metadata JSON is not an object, ignoring it")
        return {}
    return parsed


def _safe_name(name: str) -> str:
    try:
        return sanitize_filename(name)
    except ValueError as exc:
        raise UploadValidationError("Invalid file name") from exc


def _usable_thumbnail(thumbnail: UploadedFile | None) -> UploadedFile | None:
    if thumbnail is None or not thumbnail.data:
        return None
    try:
        filename = sanitize_filename(thumbnail.filename)
    except ValueError:
        _logger.warning("Ignoring thumbnail with unusable name %r", thumbnail.filename)
        return None
    return UploadedFile(
        filename=filename, data=thumbnail.data, content_type=thumbnail.content_type
    )


def _photo_id(metadata: dict[str, object], filename: str) -> str:
    candidate = metadata.get("filename")
    if isinstance(candidate, str) and candidate:
        try:
            return sanitize_filename(candidate)
        except ValueError:
            _logger.warning("Ignoring unusable metadata filename %r", candidate)
    return filename
