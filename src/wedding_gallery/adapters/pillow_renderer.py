"""Pillow rendering back end for the compositor."""

import io
from dataclasses import dataclass

from PIL import Image, ImageColor, ImageOps, UnidentifiedImageError

from wedding_gallery.domain.compositing import CompositeOptions
from wedding_gallery.domain.geometry import CompositeLayout, Size
from wedding_gallery.services.compositor import LoadedImage, Renderer


@dataclass
class PillowRenderer(Renderer):
    """Server-side renderer backed by Pillow."""

    resample: Image.Resampling = Image.Resampling.LANCZOS

    def decode(self, data: bytes) -> LoadedImage:
        """Decode bytes fully, applying EXIF orientation."""
        try:
            with Image.open(io.BytesIO(data)) as opened:
                opened.load()
                media_type = Image.MIME.get(opened.format or "", "image/jpeg")
                image = ImageOps.exif_transpose(opened)
        except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as exc:
            raise ValueError("Not a decodable image") from exc
        return LoadedImage(
            data=data,
            image=image,
            size=Size(width=image.width, height=image.height),
            media_type=media_type,
        )

    def render(
        self,
        layout: CompositeLayout,
        photo: LoadedImage,
        frame: LoadedImage | None,
        options: CompositeOptions,
    ) -> bytes:
        """Background, then the contain-fitted photo, then the frame on top."""
        canvas_size = (layout.canvas.width, layout.canvas.height)
        background = ImageColor.getrgb(options.background_color)[:3]
        canvas = Image.new("RGBA", canvas_size, (*background, 255))

        rect = layout.photo_rect
        source = _as_image(photo).convert("RGBA")
        if source.size != (rect.width, rect.height):
            source = source.resize((rect.width, rect.height), self.resample)
        canvas.alpha_composite(source, dest=(rect.x, rect.y))

        if frame is not None:
            overlay = _as_image(frame).convert("RGBA")
            if overlay.size != canvas_size:
                overlay = overlay.resize(canvas_size, self.resample)
            canvas.alpha_composite(overlay)

        return encode_jpeg(canvas, options.quality)

    def thumbnail(self, data: bytes, size: Size, quality: int) -> bytes:
        """Return a cover-fit JPEG thumbnail of the given size."""
        loaded = self.decode(data)
        fitted = ImageOps.fit(
            _as_image(loaded), (size.width, size.height), method=self.resample
        )
        return encode_jpeg(fitted, quality)


def encode_jpeg(image: Image.Image, quality: int) -> bytes:
    """Encode an image as an RGB JPEG."""
    buffer = io.BytesIO()
    image.convert("RGB").save(buffer, format="JPEG", quality=quality, optimize=True)
    return buffer.getvalue()


def _as_image(loaded: LoadedImage) -> Image.Image:
    if not isinstance(loaded.image, Image.Image):
        raise TypeError("PillowRenderer received an image it did not decode")
    return loaded.image
