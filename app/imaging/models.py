from dataclasses import dataclass


@dataclass(frozen=True)
class ImageMetadata:
    """Dimensions and format reported by the image probe."""

    width: int
    height: int
    format: str
