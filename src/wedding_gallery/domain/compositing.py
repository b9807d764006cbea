"""Models for compositing requests and results."""

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from PIL import ImageColor
from pydantic import BaseModel, ConfigDict, Field, field_validator

from wedding_gallery.domain.frames import FrameId
from wedding_gallery.domain.geometry import CompositeLayout

ASSET_UNAVAILABLE = "asset-unavailable"


class CompositeOptions(BaseModel):
    """Per-request compositing options. Quality is always on the 0-100 scale."""

    model_config = ConfigDict(frozen=True)

    scale_factor: float = Field(default=0.85, gt=0.0, le=1.0)
    quality: int = Field(default=90, gt=0, le=100)
    background_color: str = "white"
    passthrough_without_frame: bool = True
    reencode: bool = False

    @field_validator("background_color")
    @classmethod
    def _known_color(cls, value: str) -> str:
        ImageColor.getrgb(value)
        return value


class Preset(StrEnum):
    """Named quality/scale presets by use case."""

    PREVIEW = "preview"
    SHARE = "share"
    DOWNLOAD = "download"
    SERVER = "server"


PRESETS: dict[Preset, CompositeOptions] = {
    Preset.PREVIEW: CompositeOptions(scale_factor=0.95, quality=75),
    Preset.SHARE: CompositeOptions(scale_factor=0.95, quality=90),
    Preset.DOWNLOAD: CompositeOptions(scale_factor=0.97, quality=95),
    Preset.SERVER: CompositeOptions(scale_factor=0.85, quality=90),
}


@dataclass(frozen=True)
class ImageSource:
    """An addressable image: a URL, a local path, or in-memory bytes."""

    url: str | None = None
    path: Path | None = None
    data: bytes | None = None

    def __post_init__(self) -> None:
        given = [value for value in (self.url, self.path, self.data) if value]
        if len(given) != 1:
            raise ValueError("ImageSource needs exactly one of url, path or data")

    @classmethod
    def from_url(cls, url: str) -> "ImageSource":
        return cls(url=url)

    @classmethod
    def from_path(cls, path: Path | str) -> "ImageSource":
        return cls(path=Path(path))

    @classmethod
    def from_bytes(cls, data: bytes) -> "ImageSource":
        return cls(data=data)

    @property
    def cache_key(self) -> str | None:
        """Key for the image cache; in-memory buffers are never cached."""
        if self.url:
            return f"url:{self.url}"
        if self.path:
            return f"path:{self.path.resolve()}"
        return None

    def describe(self) -> str:
        if self.url:
            return self.url
        if self.path:
            return str(self.path)
        return f"<{len(self.data or b'')} bytes>"


@dataclass(frozen=True)
class CompositeResult:
    """An encoded composite owned by the caller that requested it."""

    data: bytes
    width: int
    height: int
    media_type: str
    frame_id: FrameId
    layout: CompositeLayout | None = None
    fallback_reason: str | None = None

    @property
    def framed(self) -> bool:
        return self.frame_id is not FrameId.NONE and self.fallback_reason is None
