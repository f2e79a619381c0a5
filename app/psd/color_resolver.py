"""Resolves a single representative color for a PSD layer.

Sources are tried in priority order and the first one present wins:
explicit fill color, solid color property, raw channel samples, and the
``SoCo`` solid-color entry of the additional layer properties.
"""

from collections.abc import Callable, Mapping
from typing import Any

from app.color.quantizer import rgb_to_hex
from app.psd.models import LayerNode, RGBTuple

ColorSource = Callable[[LayerNode], str | None]


def _clamp(value: float) -> float:
    return min(255.0, max(0.0, float(value)))


def rgba_to_hex(rgba: RGBTuple | None) -> str | None:
    """Hex for an r, g, b[, a] tuple in 0-255; alpha is appended only when below 255."""
    if rgba is None or len(rgba) < 3:
        return None
    r, g, b = (_clamp(c) for c in rgba[:3])
    base = rgb_to_hex(r, g, b)
    if len(rgba) > 3:
        alpha = int(_clamp(rgba[3]) + 0.5)
        if alpha < 255:
            return f"{base}{alpha:02x}"
    return base


def _rgb_hex(rgb: RGBTuple | None) -> str | None:
    if rgb is None or len(rgb) < 3:
        return None
    return rgb_to_hex(*(_clamp(c) for c in rgb[:3]))


def from_fill(layer: LayerNode) -> str | None:
    return _rgb_hex(layer.fill_color)


def from_solid_color(layer: LayerNode) -> str | None:
    return _rgb_hex(layer.solid_color)


def from_channels(layer: LayerNode) -> str | None:
    return _rgb_hex(layer.channels if len(layer.channels) >= 3 else None)


def from_additional_properties(layer: LayerNode) -> str | None:
    soco = layer.additional_properties.get("SoCo")
    if not isinstance(soco, Mapping):
        return None
    data = soco.get("data")
    color: Any = data.get("Clr") if isinstance(data, Mapping) else None
    if not isinstance(color, Mapping):
        return None
    try:
        components = [float(color[key]) * 255 for key in ("r", "g", "b")]
    except (KeyError, TypeError, ValueError):
        return None
    return _rgb_hex(tuple(components))


COLOR_SOURCES: tuple[ColorSource, ...] = (
    from_fill,
    from_solid_color,
    from_channels,
    from_additional_properties,
)


def resolve_color(layer: LayerNode, sources: tuple[ColorSource, ...] = COLOR_SOURCES) -> str | None:
    for source in sources:
        color = source(layer)
        if color is not None:
            return color
    return None
