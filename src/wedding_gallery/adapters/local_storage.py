"""Filesystem-backed photo storage."""

from dataclasses import dataclass
from pathlib import Path

from wedding_gallery.domain.photos import sanitize_filename
from wedding_gallery.services.uploads import PhotoStorage, StoredFile

IMAGE_SUFFIXES = frozenset({".jpg", ".jpeg", ".png", ".gif"})


@dataclass
class LocalPhotoStorage(PhotoStorage):
    """Stores photos and thumbnails in two directories."""

    photos_dir: Path
    thumbnails_dir: Path

    def save_photo(self, filename: str, data: bytes) -> None:
        """Write a photo; last write wins."""
        _write(self.photos_dir / sanitize_filename(filename), data)

    def read_photo(self, filename: str) -> bytes | None:
        """Return a photo's bytes, if present."""
        path = self.photos_dir / sanitize_filename(filename)
        if not path.is_file():
            return None
        return path.read_bytes()

    def photo_exists(self, filename: str) -> bool:
        """Return true when a photo file exists."""
        try:
            return (self.photos_dir / sanitize_filename(filename)).is_file()
        except ValueError:
            return False

    def list_photos(self) -> list[StoredFile]:
        """Return stored image files, ignoring other entries."""
        if not self.photos_dir.is_dir():
            return []
        return [
            StoredFile(
                filename=path.name,
                modified_at=int(path.stat().st_mtime * 1000),
            )
            for path in sorted(self.photos_dir.iterdir())
            if path.is_file() and path.suffix.lower() in IMAGE_SUFFIXES
        ]

    def save_thumbnail(self, filename: str, data: bytes) -> None:
        """Write a thumbnail; last write wins."""
        _write(self.thumbnails_dir / sanitize_filename(filename), data)


def _write(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.tmp")
    tmp_path.write_bytes(data)
    tmp_path.replace(path)
