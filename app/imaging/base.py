from abc import ABC, abstractmethod

from app.color.models import RGB
from app.imaging.models import ImageMetadata


class BaseImageProbe(ABC):
    """Contract for image metadata and pixel access adapters."""

    @abstractmethod
    def probe(self, image_bytes: bytes) -> ImageMetadata:
        """Return width, height and format of an encoded image.

        Raises:
            InvalidInputError: if the bytes cannot be decoded as an image.
        """

    @abstractmethod
    def raw_pixels(self, image_bytes: bytes) -> bytes:
        """Decode to packed 8-bit RGB triples."""

    @abstractmethod
    def dominant(self, pixels: bytes) -> RGB:
        """Return the dominant color sample of packed RGB triples from raw_pixels."""
