from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

RGBTuple = tuple[float, ...]


class LayerKind(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    SHAPE = "shape"
    ADJUSTMENT = "adjustment"
    GROUP = "group"
    SMART_OBJECT = "smartObject"


@dataclass(frozen=True)
class Bounds:
    """Absolute pixel rectangle of a layer."""

    top: int = 0
    left: int = 0
    bottom: int = 0
    right: int = 0

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top


@dataclass(frozen=True)
class TextPayload:
    """Text of a type layer with its first style run."""

    value: str
    font: str = ""
    size: float = 0.0
    color: RGBTuple | None = None  # r, g, b[, a] in 0-255
    alignment: str = "left"
    bold: bool = False
    italic: bool = False
    underline: bool = False


@dataclass(frozen=True)
class LayerNode:
    """One node of a parsed PSD tree. Group bounds come from the parser."""

    name: str
    kind: LayerKind
    bounds: Bounds = field(default_factory=Bounds)
    blend_mode: str = "normal"
    opacity: int = 255
    visible: bool = True
    text: TextPayload | None = None
    fill_color: RGBTuple | None = None
    solid_color: RGBTuple | None = None
    channels: RGBTuple = ()
    additional_properties: Mapping[str, Any] = field(default_factory=dict)
    children: tuple["LayerNode", ...] = ()

    @property
    def is_group(self) -> bool:
        return self.kind is LayerKind.GROUP


@dataclass(frozen=True)
class PsdDocument:
    width: int
    height: int
    root: LayerNode


@dataclass(frozen=True)
class TextStyle:
    font: str = ""
    size: float = 0.0
    color: str | None = None
    alignment: str = "left"
    bold: bool = False
    italic: bool = False
    underline: bool = False


@dataclass(frozen=True)
class TextElement:
    """A text observation from a PSD text layer."""

    layer_name: str
    path: str
    text: str
    position: Bounds
    style: TextStyle
    group: str | None = None
    font_size: float = 0.0


@dataclass(frozen=True)
class ColorEntry:
    hex: str
    source: str
    opacity: int | None = None
    blend_mode: str | None = None


@dataclass(frozen=True)
class LayerSummary:
    name: str
    path: str
    type: str
    visible: bool
    opacity: int
    blend_mode: str
    bounds: Bounds
    color: str | None = None
    text: str | None = None


@dataclass(frozen=True)
class GroupRecord:
    name: str
    path: str
    bounds: Bounds
    layers: list[LayerSummary] = field(default_factory=list)
