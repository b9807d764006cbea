"""Domain models for decorative frames."""

from dataclasses import dataclass
from enum import StrEnum


class FrameId(StrEnum):
    """Enumerated frame identifiers."""

    STANDARD = "standard"
    CUSTOM = "custom"
    INSTA = "insta"
    NONE = "none"


@dataclass(frozen=True)
class Frame:
    """A PNG overlay with a transparent interior where the photo shows through."""

    id: FrameId
    name: str
    asset_filename: str | None
    thumbnail_filename: str | None

    @property
    def is_passthrough(self) -> bool:
        """Return true for the sentinel entry that applies no overlay."""
        return self.asset_filename is None

    @property
    def asset_url(self) -> str | None:
        if self.asset_filename is None:
            return None
        return f"/frames/{self.asset_filename}"

    @property
    def thumbnail_url(self) -> str | None:
        if self.thumbnail_filename is None:
            return None
        return f"/frames/{self.thumbnail_filename}"

    def to_dict(self) -> dict[str, object]:
        """Serialize for the frames API."""
        return {
            "id": self.id.value,
            "name": self.name,
            "frameUrl": self.asset_url,
            "thumbnailUrl": self.thumbnail_url,
        }
