"""Domain models for gallery photos."""

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

_FILENAME_TIMESTAMP = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2})-(\d{2})-(\d{2})-(\d{3})Z"
)
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


@dataclass(frozen=True)
class PhotoRecord:
    """A stored photo as listed by the gallery."""

    photo_id: str
    filename: str
    url: str
    thumbnail_url: str
    timestamp: int
    metadata: dict[str, object] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        """Serialize for gallery responses; metadata keys sit alongside."""
        return {
            **self.metadata,
            "filename": self.filename,
            "photoId": self.photo_id,
            "url": self.url,
            "thumbnailUrl": self.thumbnail_url,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class UploadReceipt:
    """Result of accepting an upload."""

    photo_id: str
    filename: str
    framed_url: str | None
    thumbnail_filename: str | None


def timestamp_from_filename(filename: str) -> int | None:
    """Extract epoch millis from names like ``original_<iso>.jpg``."""
    match = _FILENAME_TIMESTAMP.search(filename)
    if match is None:
        return None
    year, month, day, hour, minute, second, millis = (int(g) for g in match.groups())
    try:
        moment = datetime(
            year, month, day, hour, minute, second, millis * 1000, tzinfo=UTC
        )
    except ValueError:
        return None
    return to_millis(moment)


def coerce_timestamp(value: object) -> int | None:
    """Interpret a metadata timestamp given as epoch millis or an ISO string."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return int(value)
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return timestamp_from_filename(value)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=UTC)
        return to_millis(parsed)
    return None


def to_millis(moment: datetime) -> int:
    """Return epoch milliseconds without float rounding."""
    return (moment - _EPOCH) // timedelta(milliseconds=1)


def sanitize_filename(name: str) -> str:
    """Strip directories and replace characters outside ``[A-Za-z0-9._-]``."""
    base = name.replace("\\", "/").rsplit("/", maxsplit=1)[-1]
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", base)
    if cleaned in {"", ".", ".."}:
        raise ValueError(f"Unusable filename: {name!r}")
    return cleaned


def framed_filename(filename: str) -> str:
    """Name of the framed copy: ``original_`` becomes ``wedding_``."""
    if "original_" in filename:
        return filename.replace("original_", "wedding_", 1)
    return f"wedding_{filename}"
