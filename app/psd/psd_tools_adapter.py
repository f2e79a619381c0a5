import io
from typing import Any

from psd_tools import PSDImage
from psd_tools.constants import Tag

from app.processor.exceptions import ParseFailureError
from app.psd.base import BasePsdParser
from app.psd.models import Bounds, LayerKind, LayerNode, PsdDocument, RGBTuple, TextPayload

_KIND_MAP: dict[str, LayerKind] = {
    "type": LayerKind.TEXT,
    "group": LayerKind.GROUP,
    "artboard": LayerKind.GROUP,
    "pixel": LayerKind.IMAGE,
    "shape": LayerKind.SHAPE,
    "smartobject": LayerKind.SMART_OBJECT,
    "solidcolorfill": LayerKind.SHAPE,
    "gradientfill": LayerKind.SHAPE,
    "patternfill": LayerKind.SHAPE,
}

_JUSTIFICATION = {0: "left", 1: "right", 2: "center", 3: "justify"}

_COLOR_KEY = b"Clr "
_RGB_KEYS = (b"Rd  ", b"Grn ", b"Bl  ")


def _plain(value: Any) -> Any:
    """Unwrap psd-tools engine/descriptor wrapper objects."""
    return getattr(value, "value", value)


def _lookup(mapping: Any, key: bytes) -> Any:
    """Descriptor lookup tolerant of enum or raw byte keys."""
    if not hasattr(mapping, "items"):
        return None
    for k, v in mapping.items():
        if _plain(k) == key:
            return v
    return None


def _descriptor_rgb(descriptor: Any) -> RGBTuple | None:
    color = _lookup(descriptor, _COLOR_KEY)
    if color is None:
        return None
    components = [_lookup(color, key) for key in _RGB_KEYS]
    if any(c is None for c in components):
        return None
    return tuple(float(_plain(c)) for c in components)


# Style fields resolve independently; a malformed entry falls back to its default.
def _font_name(style: Any, fontset: Any) -> str:
    try:
        font = fontset[int(_plain(style.get("Font", 0)))]["Name"]
    except (KeyError, IndexError, TypeError, ValueError, AttributeError):
        return ""
    return str(_plain(font)).strip("\ufeff")


def _style_float(style: Any, key: str) -> float:
    try:
        return float(_plain(style.get(key, 0.0)))
    except (TypeError, ValueError, AttributeError):
        return 0.0


def _fill_color(style: Any) -> RGBTuple | None:
    try:
        fill = style.get("FillColor")
        if fill is None:
            return None
        a, r, g, b = (float(_plain(v)) * 255 for v in fill["Values"])
    except (KeyError, IndexError, TypeError, ValueError, AttributeError):
        return None
    return (r, g, b, a)


def _alignment(paragraph: Any) -> str:
    try:
        justification = int(_plain(paragraph.get("Properties", {}).get("Justification", 0)))
    except (TypeError, ValueError, AttributeError):
        return "left"
    return _JUSTIFICATION.get(justification, "left")


class PsdToolsParser(BasePsdParser):
    """Parses PSD documents with psd-tools into LayerNode trees."""

    def parse(self, psd_bytes: bytes) -> PsdDocument:
        try:
            psd = PSDImage.open(io.BytesIO(psd_bytes))
            root = LayerNode(
                name="",
                kind=LayerKind.GROUP,
                bounds=Bounds(top=0, left=0, bottom=psd.height, right=psd.width),
                children=tuple(self._convert(layer) for layer in psd),
            )
            return PsdDocument(width=psd.width, height=psd.height, root=root)
        except ParseFailureError:
            raise
        except Exception as exc:
            raise ParseFailureError(f"psd-tools parsing failed: {exc}") from exc

    def _convert(self, layer: Any) -> LayerNode:
        kind = _KIND_MAP.get(layer.kind, LayerKind.ADJUSTMENT)
        text = self._text_payload(layer) if kind is LayerKind.TEXT else None
        soco = None
        if layer.tagged_blocks is not None:
            soco = layer.tagged_blocks.get_data(Tag.SOLID_COLOR_SHEET_SETTING)
        soco_rgb = _descriptor_rgb(soco)

        additional: dict[str, Any] = {}
        if soco_rgb is not None:
            r, g, b = (c / 255 for c in soco_rgb)
            additional["SoCo"] = {"data": {"Clr": {"r": r, "g": g, "b": b}}}

        return LayerNode(
            name=layer.name,
            kind=kind,
            bounds=Bounds(
                top=layer.top, left=layer.left, bottom=layer.bottom, right=layer.right
            ),
            blend_mode=str(getattr(layer.blend_mode, "name", layer.blend_mode)).lower(),
            opacity=int(layer.opacity),
            visible=bool(layer.visible),
            text=text,
            fill_color=text.color[:3] if text is not None and text.color else None,
            solid_color=soco_rgb if layer.kind == "solidcolorfill" else None,
            channels=self._channel_means(layer) if kind is LayerKind.IMAGE else (),
            additional_properties=additional,
            children=tuple(self._convert(child) for child in layer)
            if kind is LayerKind.GROUP
            else (),
        )

    @staticmethod
    def _channel_means(layer: Any) -> RGBTuple:
        if not layer.has_pixels():
            return ()
        pixels = layer.numpy()
        if pixels is None or pixels.ndim != 3 or pixels.shape[2] < 3:
            return ()
        return tuple(float(pixels[:, :, i].mean()) * 255 for i in range(3))

    @staticmethod
    def _text_payload(layer: Any) -> TextPayload:
        value = str(layer.text or "").replace("\r", "\n")
        try:
            style = layer.engine_dict["StyleRun"]["RunArray"][0]["StyleSheet"]["StyleSheetData"]
            paragraph = layer.engine_dict["ParagraphRun"]["RunArray"][0]["ParagraphSheet"]
            fontset = layer.resource_dict["FontSet"]
        except (KeyError, IndexError, TypeError):
            return TextPayload(value=value)
        if not hasattr(style, "get") or not hasattr(paragraph, "get"):
            return TextPayload(value=value)

        return TextPayload(
            value=value,
            font=_font_name(style, fontset),
            size=_style_float(style, "FontSize"),
            color=_fill_color(style),
            alignment=_alignment(paragraph),
            bold=bool(_plain(style.get("FauxBold", False))),
            italic=bool(_plain(style.get("FauxItalic", False))),
            underline=bool(_plain(style.get("Underline", False))),
        )
