"""Browser canvas back end.

Instead of pixels this back end emits the canvas 2D calls a browser performs,
in order, so guests' devices composite with exactly the server's layout.
"""

from dataclasses import dataclass

from wedding_gallery.domain.compositing import CompositeOptions
from wedding_gallery.domain.geometry import CompositeLayout


@dataclass(frozen=True)
class CanvasPlan:
    """Ordered canvas operations plus the encoder settings."""

    width: int
    height: int
    operations: list[dict[str, object]]
    layout: CompositeLayout

    def to_dict(self) -> dict[str, object]:
        return {
            "width": self.width,
            "height": self.height,
            "operations": self.operations,
            "layout": self.layout.to_dict(),
        }


class CanvasPlanRenderer:
    """Builds canvas draw plans from a shared layout."""

    def plan(
        self,
        layout: CompositeLayout,
        photo_url: str,
        frame_url: str | None,
        options: CompositeOptions,
    ) -> CanvasPlan:
        """Return the draw plan for one composite."""
        canvas = layout.canvas
        rect = layout.photo_rect
        operations: list[dict[str, object]] = [
            {
                "op": "fillRect",
                "fillStyle": options.background_color,
                "x": 0,
                "y": 0,
                "width": canvas.width,
                "height": canvas.height,
            },
            {
                "op": "drawImage",
                "src": photo_url,
                "x": rect.x,
                "y": rect.y,
                "width": rect.width,
                "height": rect.height,
            },
        ]
        if frame_url is not None:
            operations.append(
                {
                    "op": "drawImage",
                    "src": frame_url,
                    "x": 0,
                    "y": 0,
                    "width": canvas.width,
                    "height": canvas.height,
                }
            )
        # toDataURL takes quality on a 0-1 scale.
        operations.append(
            {"op": "toDataURL", "type": "image/jpeg", "quality": options.quality / 100}
        )
        return CanvasPlan(
            width=canvas.width,
            height=canvas.height,
            operations=operations,
            layout=layout,
        )
