from app.logging.logger import Log
from app.processor.exceptions import ExtractionError
from app.processor.file_loader import FileLoader
from app.processor.models import (
    Analysis,
    BatchResult,
    ColorScheme,
    ContentAnalysis,
    Dimensions,
    ExtractionResult,
    FileInfo,
    SourceFile,
    TextContent,
)
from app.processor.specs import psd_specs
from app.processor.text_extraction import flatten_psd_text
from app.psd.base import BasePsdParser
from app.psd.models import ColorEntry, PsdDocument
from app.psd.text_classifier import classify_text_elements
from app.psd.walker import LayerTreeWalker, WalkResult

PSD_MIME_TYPE = "image/vnd.adobe.photoshop"


class PsdPipeline:
    """Parses, walks and classifies PSD documents one after another.

    Each file is isolated: a parse failure yields a placeholder and the
    remaining documents are still processed.
    """

    BATCH_TYPE = "psd"

    def __init__(
        self,
        parser: BasePsdParser,
        walker: LayerTreeWalker | None = None,
        file_loader: FileLoader | None = None,
    ) -> None:
        self._parser = parser
        self._walker = walker or LayerTreeWalker()
        self._file_loader = file_loader or FileLoader()

    def process_file(self, source: SourceFile) -> ExtractionResult:
        name = source.name
        stage = "load"
        try:
            raw_bytes = self._file_loader.load(source)
            stage = "parse"
            document = self._parser.parse(raw_bytes)
            stage = "walk"
            walk = self._walker.walk(document)
        except ExtractionError as exc:
            Log.error("PSD extraction failed", file=name, stage=stage, error=exc)
            return ExtractionResult.failed(source, exc.message, exc.code)
        except Exception as exc:
            Log.error("PSD extraction failed", file=name, stage=stage, error=exc)
            return ExtractionResult.failed(source, str(exc), ExtractionError.code)

        Log.info(
            f"PSD {name} walked: {len(walk.layers)} layers, {len(walk.groups)} groups, "
            f"{len(walk.text_elements)} text layers"
        )
        return self._assemble(source, len(raw_bytes), document, walk)

    def process_batch(self, sources: list[SourceFile]) -> BatchResult:
        results = [self.process_file(source) for source in sources]
        batch = BatchResult.from_results(self.BATCH_TYPE, results)
        if sources:
            Log.info(
                f"PSD batch done: {batch.successful_count}/{batch.processed_count} succeeded"
            )
        return batch

    @staticmethod
    def _assemble(
        source: SourceFile,
        size: int,
        document: PsdDocument,
        walk: WalkResult,
    ) -> ExtractionResult:
        classified = classify_text_elements(walk.text_elements)
        return ExtractionResult(
            file_info=FileInfo(
                name=source.name,
                size=size,
                type=source.mime_type or PSD_MIME_TYPE,
                extension=source.extension.lower(),
                dimensions=Dimensions(width=document.width, height=document.height),
            ),
            analysis=Analysis(
                image_specs=psd_specs(document.width, document.height),
                content=ContentAnalysis(
                    text_content=TextContent(
                        headline=list(classified.headlines),
                        body_text=list(classified.body),
                        cta=list(classified.ctas),
                    ),
                    color_scheme=_color_scheme(walk.colors),
                    layers=walk.layers,
                    groups=walk.groups,
                    colors=walk.colors,
                ),
            ),
            text_extraction=flatten_psd_text(walk, classified),
        )


def _color_scheme(colors: list[ColorEntry]) -> ColorScheme:
    """Dominance follows first appearance in the layer tree."""
    if not colors:
        return ColorScheme()
    return ColorScheme(dominant=colors[0].hex, accent=[c.hex for c in colors[1:]])
