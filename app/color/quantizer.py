"""Pixel palette ranking and WCAG contrast."""

import re

import numpy as np

from app.color.models import RGB, Palette
from app.processor.exceptions import InvalidColorFormatError

_HEX_RE = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)

_LUMINANCE_WEIGHTS = (0.2126, 0.7152, 0.0722)


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Format an RGB triple as ``#rrggbb``; channels are rounded half-up."""
    return "#" + "".join(f"{int(np.floor(c + 0.5)):02x}" for c in (r, g, b))


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    """Parse ``#rrggbb`` (leading ``#`` optional, any case).

    Raises:
        InvalidColorFormatError: if the value is not 6 hex digits.
    """
    match = _HEX_RE.match(value or "")
    if match is None:
        raise InvalidColorFormatError(f"Invalid hex color: {value!r}")
    r, g, b = (int(part, 16) for part in match.groups())
    return r, g, b


def relative_luminance(value: str) -> float:
    channels = []
    for c in hex_to_rgb(value):
        s = c / 255
        channels.append(s / 12.92 if s <= 0.03928 else ((s + 0.055) / 1.055) ** 2.4)
    return sum(w * c for w, c in zip(_LUMINANCE_WEIGHTS, channels))


def contrast_ratio(first: str, second: str) -> float:
    """WCAG contrast ratio between two hex colors, rounded to one decimal."""
    l1 = relative_luminance(first)
    l2 = relative_luminance(second)
    ratio = (max(l1, l2) + 0.05) / (min(l1, l2) + 0.05)
    return float(np.floor(ratio * 10 + 0.5) / 10)


class ColorQuantizer:
    """Ranks the exact colors of a raw RGB buffer by frequency."""

    def quantize(self, pixels: bytes, dominant: RGB) -> Palette:
        """Build a palette from packed RGB bytes and an externally computed dominant color.

        Secondary colors skip the two most frequent entries so the dominant
        color is not reported twice. Ties keep first-appearance order.
        """
        ranked = self.rank(pixels)
        return Palette(
            primary=[rgb_to_hex(*dominant)],
            secondary=ranked[2:4],
            background=ranked[-1:],
        )

    @staticmethod
    def rank(pixels: bytes) -> list[str]:
        """Return distinct hex colors ordered by descending frequency."""
        usable = len(pixels) - len(pixels) % 3
        if usable == 0:
            return []
        data = np.frombuffer(pixels[:usable], dtype=np.uint8).reshape(-1, 3)
        packed = (
            data[:, 0].astype(np.uint32) << 16
            | data[:, 1].astype(np.uint32) << 8
            | data[:, 2].astype(np.uint32)
        )
        values, first_index, counts = np.unique(
            packed, return_index=True, return_counts=True
        )
        order = np.lexsort((first_index, -counts))
        return [f"#{int(values[i]):06x}" for i in order]
