from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from app.color.models import Palette
from app.imaging.models import ImageMetadata
from app.processor.models import (
    CompositionMetrics,
    ExtractionResult,
    SourceFile,
    TextContent,
    VisualElements,
)
from app.vision.models import LabelDetection, TextDetection


@dataclass(slots=True)
class PipelineContext:
    """Per-file state of the raster pipeline. Never shared between files."""

    source: SourceFile
    raw_bytes: bytes = b""
    metadata: ImageMetadata | None = None
    labels: list[LabelDetection] = field(default_factory=list)
    text_detections: list[TextDetection] = field(default_factory=list)
    palette: Palette | None = None
    visual_elements: VisualElements = field(default_factory=VisualElements)
    text_content: TextContent = field(default_factory=TextContent)
    composition: CompositionMetrics = field(default_factory=CompositionMetrics)
    result: ExtractionResult | None = None


class PipelineStep(ABC):
    # Used in log lines to report where a file failed.
    name: str = "step"

    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
