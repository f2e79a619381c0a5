import io

import numpy as np
from PIL import Image, UnidentifiedImageError

from app.color.models import RGB
from app.imaging.base import BaseImageProbe
from app.imaging.models import ImageMetadata
from app.processor.exceptions import InvalidInputError

_HISTOGRAM_BINS = 16


class PillowImageProbe(BaseImageProbe):
    """Reads image metadata and pixels with Pillow."""

    def probe(self, image_bytes: bytes) -> ImageMetadata:
        with self._open(image_bytes) as image:
            return ImageMetadata(
                width=image.width,
                height=image.height,
                format=(image.format or "").lower(),
            )

    def raw_pixels(self, image_bytes: bytes) -> bytes:
        with self._open(image_bytes) as image:
            return image.convert("RGB").tobytes()

    def dominant(self, pixels: bytes) -> RGB:
        """Centre of the most populated bin of a 16x16x16 RGB histogram."""
        usable = len(pixels) - len(pixels) % 3
        if usable == 0:
            return (0.0, 0.0, 0.0)
        data = np.frombuffer(pixels[:usable], dtype=np.uint8).reshape(-1, 3)
        step = 256 // _HISTOGRAM_BINS
        bins = data // step
        index = (
            bins[:, 0].astype(np.int32) * _HISTOGRAM_BINS * _HISTOGRAM_BINS
            + bins[:, 1].astype(np.int32) * _HISTOGRAM_BINS
            + bins[:, 2].astype(np.int32)
        )
        top = int(np.bincount(index).argmax())
        r, rem = divmod(top, _HISTOGRAM_BINS * _HISTOGRAM_BINS)
        g, b = divmod(rem, _HISTOGRAM_BINS)
        half = step / 2
        return (r * step + half, g * step + half, b * step + half)

    @staticmethod
    def _open(image_bytes: bytes) -> Image.Image:
        try:
            image = Image.open(io.BytesIO(image_bytes))
            image.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise InvalidInputError(f"Unsupported or corrupt image: {exc}") from exc
        return image
