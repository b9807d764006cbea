"""Layout math shared by every compositing back end.

Both the Pillow renderer and the browser canvas plan draw from the
:class:`CompositeLayout` computed here, so fit, centering and layering order
cannot drift between them.
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Size:
    """Pixel dimensions."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid size {self.width}x{self.height}")

    @property
    def aspect(self) -> float:
        return self.width / self.height


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in output pixel coordinates."""

    x: int
    y: int
    width: int
    height: int

    def to_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class CompositeLayout:
    """Where everything lands on the output canvas.

    ``photo_box`` is the region reserved for the photo (frame size times the
    scale factor, centered). ``photo_rect`` is the photo itself after a
    contain fit inside that box; the rest of the box stays transparent so the
    background fill shows through.
    """

    canvas: Size
    photo_box: Rect
    photo_rect: Rect

    def to_dict(self) -> dict[str, object]:
        return {
            "canvas": {"width": self.canvas.width, "height": self.canvas.height},
            "photoBox": self.photo_box.to_dict(),
            "photoRect": self.photo_rect.to_dict(),
        }


def round_half_up(value: float) -> int:
    """Round like JavaScript's ``Math.round`` so browser and server agree."""
    return math.floor(value + 0.5)


def centered_offset(outer: int, inner: int) -> int:
    """Return the floored offset that centers ``inner`` within ``outer``."""
    return math.floor((outer - inner) / 2)


def scaled_box(frame: Size, scale_factor: float) -> Size:
    """Return the photo box size for a frame and scale factor."""
    if not 0 < scale_factor <= 1:
        raise ValueError(f"scale_factor must be in (0, 1], got {scale_factor}")
    return Size(
        width=max(1, round_half_up(frame.width * scale_factor)),
        height=max(1, round_half_up(frame.height * scale_factor)),
    )


def contain_fit(photo: Size, box: Size) -> Size:
    """Scale ``photo`` to fit entirely inside ``box`` preserving aspect."""
    ratio = min(box.width / photo.width, box.height / photo.height)
    return Size(
        width=min(box.width, max(1, round_half_up(photo.width * ratio))),
        height=min(box.height, max(1, round_half_up(photo.height * ratio))),
    )


def compute_layout(frame: Size, photo: Size, scale_factor: float) -> CompositeLayout:
    """Compute the canvas, photo box and fitted photo rectangle."""
    box = scaled_box(frame, scale_factor)
    box_x = centered_offset(frame.width, box.width)
    box_y = centered_offset(frame.height, box.height)
    fitted = contain_fit(photo, box)
    return CompositeLayout(
        canvas=frame,
        photo_box=Rect(x=box_x, y=box_y, width=box.width, height=box.height),
        photo_rect=Rect(
            x=box_x + centered_offset(box.width, fitted.width),
            y=box_y + centered_offset(box.height, fitted.height),
            width=fitted.width,
            height=fitted.height,
        ),
    )


def unframed_layout(photo: Size) -> CompositeLayout:
    """Layout for drawing a photo onto a canvas of its own size."""
    full = Rect(x=0, y=0, width=photo.width, height=photo.height)
    return CompositeLayout(canvas=photo, photo_box=full, photo_rect=full)
