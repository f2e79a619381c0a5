from dataclasses import dataclass, field


@dataclass(frozen=True)
class BoundingBox:
    """Box in normalized [0, 1] image coordinates."""

    left: float = 0.0
    top: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass(frozen=True)
class LabelInstance:
    """One located occurrence of a label."""

    bounding_box: BoundingBox
    confidence: float = 0.0


@dataclass(frozen=True)
class LabelDetection:
    """A label returned by the vision service."""

    name: str
    confidence: float
    instances: list[LabelInstance] = field(default_factory=list)

    @property
    def primary_box(self) -> BoundingBox | None:
        return self.instances[0].bounding_box if self.instances else None


@dataclass(frozen=True)
class TextDetection:
    """A LINE or WORD returned by the vision text detector."""

    text: str
    type: str
    confidence: float
    bounding_box: BoundingBox

