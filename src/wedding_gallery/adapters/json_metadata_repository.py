"""JSON sidecar files for photo metadata."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from wedding_gallery.domain.photos import sanitize_filename
from wedding_gallery.services.uploads import MetadataRepository

_logger = logging.getLogger(__name__)


@dataclass
class JsonMetadataRepository(MetadataRepository):
    """Stores one ``{photo_id}.json`` file per photo."""

    data_dir: Path

    def save(self, photo_id: str, metadata: dict[str, object]) -> None:
        """Write the sidecar record, replacing any previous one."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        path = self._path(photo_id)
        path.write_text(json.dumps(metadata, default=str), encoding="utf-8")

    def get(self, photo_id: str) -> dict[str, object] | None:
        """Return the sidecar record; unreadable files count as absent."""
        path = self._path(photo_id)
        if not path.is_file():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            _logger.warning("Error reading metadata for %s: %s", photo_id, exc)
            return None
        return data if isinstance(data, dict) else None

    def _path(self, photo_id: str) -> Path:
        return self.data_dir / f"{sanitize_filename(photo_id)}.json"
