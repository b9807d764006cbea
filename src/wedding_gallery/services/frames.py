"""Static catalog of available frames."""

from dataclasses import dataclass
from pathlib import Path

from wedding_gallery.domain.frames import Frame, FrameId
from wedding_gallery.errors import UnknownFrameError

DEFAULT_FRAMES: tuple[Frame, ...] = (
    Frame(
        id=FrameId.STANDARD,
        name="Standard",
        asset_filename="wedding-frame-standard.png",
        thumbnail_filename="standard-thumbnail.png",
    ),
    Frame(
        id=FrameId.CUSTOM,
        name="Elegant Gold",
        asset_filename="wedding-frame-custom.png",
        thumbnail_filename="custom-thumbnail.png",
    ),
    Frame(
        id=FrameId.INSTA,
        name="Instagram",
        asset_filename="wedding-frame-insta.png",
        thumbnail_filename="insta-thumbnail.png",
    ),
    Frame(
        id=FrameId.NONE,
        name="No frame",
        asset_filename=None,
        thumbnail_filename=None,
    ),
)


@dataclass
class FrameCatalog:
    """Lookup over the fixed frame list and its asset directory."""

    frames_dir: Path
    frames: tuple[Frame, ...] = DEFAULT_FRAMES

    def list_frames(self) -> list[Frame]:
        """Return frames in display order, the pass-through entry last."""
        return list(self.frames)

    def get_frame(self, frame_id: str | FrameId) -> Frame:
        """Return a frame by id."""
        for frame in self.frames:
            if frame.id == frame_id:
                return frame
        raise UnknownFrameError(f"Unknown frame: {frame_id}")

    def asset_path(self, frame: Frame) -> Path | None:
        """Return where the frame's PNG lives on disk, if it has one."""
        if frame.asset_filename is None:
            return None
        return self.frames_dir / frame.asset_filename
