import mimetypes
from dataclasses import dataclass, field
from pathlib import Path

from app.psd.models import ColorEntry, GroupRecord, LayerSummary, TextElement


@dataclass(frozen=True)
class SourceFile:
    """An uploaded asset as handed over by the upload boundary."""

    path: Path
    mime_type: str | None
    size: int
    extension: str
    original_name: str | None = None

    @property
    def name(self) -> str:
        """Client-side file name, falling back to the name on disk."""
        return self.original_name or self.path.name

    @classmethod
    def from_path(cls, path: Path | str, mime_type: str | None = None) -> "SourceFile":
        path = Path(path)
        return cls(
            path=path,
            mime_type=mime_type or mimetypes.guess_type(path.name)[0],
            size=path.stat().st_size if path.exists() else 0,
            extension=path.suffix,
        )


@dataclass(frozen=True)
class Dimensions:
    width: int
    height: int


@dataclass(frozen=True)
class Position:
    """Rectangle as x/y/width/height (percent or pixels depending on producer)."""

    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class VisualElement:
    name: str
    confidence: float
    position: Position | None
    size: float


@dataclass(frozen=True)
class TextItem:
    """A classified OCR line."""

    text: str
    position: Position
    confidence: float
    font_size: int


@dataclass
class VisualElements:
    products: list[VisualElement] = field(default_factory=list)
    people: list[VisualElement] = field(default_factory=list)
    background_elements: list[VisualElement] = field(default_factory=list)
    branding: list[VisualElement] = field(default_factory=list)


@dataclass
class TextContent:
    """Text buckets. Raster buckets hold TextItem, PSD buckets hold TextElement."""

    headline: list[TextItem | TextElement] = field(default_factory=list)
    body_text: list[TextItem | TextElement] = field(default_factory=list)
    cta: list[TextItem | TextElement] = field(default_factory=list)
    disclaimers: list[TextItem | TextElement] = field(default_factory=list)


@dataclass(frozen=True)
class ColorScheme:
    dominant: str | None = None
    accent: list[str] = field(default_factory=list)
    background: str | None = None
    contrast_ratio: float = 0.0


@dataclass(frozen=True)
class CompositionMetrics:
    text_coverage: float = 0.0
    visual_coverage: float = 0.0
    white_space: float = 0.0
    balance_score: float = 0.0


@dataclass(frozen=True)
class ImageSpecs:
    dimensions: Dimensions
    format: str
    aspect_ratio: float
    size_category: str


@dataclass
class ContentAnalysis:
    visual_elements: VisualElements = field(default_factory=VisualElements)
    text_content: TextContent = field(default_factory=TextContent)
    color_scheme: ColorScheme = field(default_factory=ColorScheme)
    composition_metrics: CompositionMetrics = field(default_factory=CompositionMetrics)
    layers: list[LayerSummary] = field(default_factory=list)
    groups: list[GroupRecord] = field(default_factory=list)
    colors: list[ColorEntry] = field(default_factory=list)


@dataclass(frozen=True)
class ErrorInfo:
    message: str
    code: str
    details: str | None = None


@dataclass
class Analysis:
    status: str = "success"
    image_specs: ImageSpecs | None = None
    content: ContentAnalysis = field(default_factory=ContentAnalysis)
    error: ErrorInfo | None = None


@dataclass(frozen=True)
class FileInfo:
    name: str
    size: int = 0
    type: str | None = None
    extension: str = ""
    dimensions: Dimensions | None = None
    error: str | None = None
    code: str | None = None


@dataclass(frozen=True)
class ContentText:
    all_text: str = ""
    by_group: dict[str, list[str]] = field(default_factory=dict)


@dataclass(frozen=True)
class TextExtraction:
    primary_text: str = ""
    headline: str = ""
    description: str = ""
    call_to_action: str = ""
    content_text: ContentText = field(default_factory=ContentText)


@dataclass(frozen=True)
class ExtractionResult:
    """Unified per-file output shared by the raster and PSD pipelines."""

    file_info: FileInfo
    analysis: Analysis = field(default_factory=Analysis)
    text_extraction: TextExtraction = field(default_factory=TextExtraction)

    @property
    def succeeded(self) -> bool:
        return self.file_info.error is None

    @classmethod
    def failed(cls, source: SourceFile, message: str, code: str) -> "ExtractionResult":
        """Placeholder for a file whose extraction failed."""
        return cls(
            file_info=FileInfo(
                name=source.name,
                size=source.size,
                type=source.mime_type,
                extension=source.extension,
                error=message,
                code=code,
            ),
            analysis=Analysis(status="error", error=ErrorInfo(message=message, code=code)),
        )


@dataclass(frozen=True)
class BatchResult:
    """Outcome of one pipeline over one request's files."""

    type: str
    status: str = "success"
    processed_count: int = 0
    successful_count: int = 0
    results: list[ExtractionResult] = field(default_factory=list)
    error: ErrorInfo | None = None

    @classmethod
    def from_results(cls, batch_type: str, results: list[ExtractionResult]) -> "BatchResult":
        return cls(
            type=batch_type,
            processed_count=len(results),
            successful_count=sum(1 for r in results if r.succeeded),
            results=results,
        )

    @classmethod
    def failed(cls, batch_type: str, message: str, code: str) -> "BatchResult":
        return cls(type=batch_type, status="error", error=ErrorInfo(message=message, code=code))
