"""Gallery listing, photo lookup and on-demand framing."""

import logging
from dataclasses import dataclass

from wedding_gallery.domain.compositing import (
    PRESETS,
    CompositeResult,
    ImageSource,
    Preset,
)
from wedding_gallery.domain.frames import FrameId
from wedding_gallery.domain.photos import (
    PhotoRecord,
    coerce_timestamp,
    timestamp_from_filename,
)
from wedding_gallery.errors import PhotoUnavailableError
from wedding_gallery.services.compositor import Compositor
from wedding_gallery.services.frames import FrameCatalog
from wedding_gallery.services.uploads import MetadataRepository, PhotoStorage

_logger = logging.getLogger(__name__)

FRAME_MARKER = "wedding-frame"
VARIANT_PREFIXES = ("", "original_", "print_", "wedding_")


@dataclass
class GalleryService:
    """Read side of the photo store."""

    storage: PhotoStorage
    metadata_repository: MetadataRepository
    compositor: Compositor
    catalog: FrameCatalog

    def list_photos(self) -> list[PhotoRecord]:
        """Return gallery photos merged with their metadata, newest first."""
        records = [
            self._record(stored.filename, stored.modified_at)
            for stored in self.storage.list_photos()
            if FRAME_MARKER not in stored.filename
        ]
        return sorted(records, key=lambda record: record.timestamp, reverse=True)

    def get_photo(self, photo_id: str) -> PhotoRecord:
        """Resolve a photo id to the first stored variant that exists."""
        modified_at = {
            stored.filename: stored.modified_at for stored in self.storage.list_photos()
        }
        for prefix in VARIANT_PREFIXES:
            candidate = f"{prefix}{photo_id}"
            if FRAME_MARKER in candidate or not self.storage.photo_exists(candidate):
                continue
            return self._record(candidate, modified_at.get(candidate, 0))
        raise PhotoUnavailableError(f"Photo not found: {photo_id}")

    async def render_framed(
        self,
        photo_id: str,
        frame_id: str | FrameId = FrameId.STANDARD,
        preset: Preset = Preset.DOWNLOAD,
    ) -> CompositeResult:
        """Composite a stored photo with a catalog frame.

        A frame whose asset is missing degrades to the unframed photo. The
        result's ``fallback_reason`` says when that happened.
        """
        frame = self.catalog.get_frame(frame_id)
        record = self.get_photo(photo_id)
        filename = self._unframed_variant(record.filename)
        data = self.storage.read_photo(filename)
        if data is None:
            raise PhotoUnavailableError(f"Photo not found: {photo_id}")
        result = await self.compositor.composite_or_fallback(
            ImageSource.from_bytes(data), frame, PRESETS[preset]
        )
        _logger.info(
            "Rendered %s with frame=%s preset=%s fallback=%s",
            filename,
            frame.id,
            preset,
            result.fallback_reason,
        )
        return result

    def _record(self, filename: str, modified_at: int) -> PhotoRecord:
        metadata = self.metadata_repository.get(filename) or {}
        photo_id = metadata.get("photoId")
        timestamp = (
            coerce_timestamp(metadata.get("timestamp"))
            or coerce_timestamp(metadata.get("serverTimestamp"))
            or timestamp_from_filename(filename)
            or modified_at
        )
        return PhotoRecord(
            photo_id=photo_id if isinstance(photo_id, str) and photo_id else filename,
            filename=filename,
            url=f"/photos/{filename}",
            thumbnail_url=f"/thumbnails/thumb_{filename}",
            timestamp=timestamp,
            metadata=metadata,
        )

    def _unframed_variant(self, filename: str) -> str:
        # Re-framing a server composite would stack two frames.
        if filename.startswith("wedding_"):
            original = filename.replace("wedding_", "original_", 1)
            if self.storage.photo_exists(original):
                return original
        return filename
