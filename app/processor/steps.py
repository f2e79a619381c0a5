import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import TypeVar

from app.color.models import Palette
from app.color.quantizer import ColorQuantizer, contrast_ratio
from app.imaging.base import BaseImageProbe
from app.logging.logger import Log
from app.processor.exceptions import ExternalServiceTimeoutError
from app.processor.file_loader import FileLoader
from app.processor.models import (
    Analysis,
    ColorScheme,
    ContentAnalysis,
    Dimensions,
    ExtractionResult,
    FileInfo,
)
from app.processor.pipeline import PipelineContext, PipelineStep
from app.processor.specs import raster_specs
from app.processor.text_extraction import flatten_raster_text
from app.vision.base import BaseVisionClient
from app.vision.categorizer import VisionCategorizer
from app.vision.composition import composition_metrics

T = TypeVar("T")


class LoadImageStep(PipelineStep):
    name = "load"

    def __init__(self, file_loader: FileLoader) -> None:
        self._file_loader = file_loader

    def run(self, context: PipelineContext) -> PipelineContext:
        context.raw_bytes = self._file_loader.load(context.source)
        Log.info(f"Loaded {len(context.raw_bytes)} bytes for image {context.source.name}")
        return context


class ProbeImageStep(PipelineStep):
    name = "probe"

    def __init__(self, image_probe: BaseImageProbe) -> None:
        self._image_probe = image_probe

    def run(self, context: PipelineContext) -> PipelineContext:
        context.metadata = self._image_probe.probe(context.raw_bytes)
        Log.info(
            f"Probed image {context.source.name}: "
            f"{context.metadata.width}x{context.metadata.height} {context.metadata.format}"
        )
        return context


class AnalyzeImageStep(PipelineStep):
    """Runs label detection, text detection and color sampling concurrently.

    All three are joined against one deadline of ``timeout_seconds``.
    """

    name = "analyze"

    def __init__(
        self,
        vision_client: BaseVisionClient,
        image_probe: BaseImageProbe,
        quantizer: ColorQuantizer,
        timeout_seconds: float,
    ) -> None:
        self._vision_client = vision_client
        self._image_probe = image_probe
        self._quantizer = quantizer
        self._timeout_seconds = timeout_seconds

    def run(self, context: PipelineContext) -> PipelineContext:
        pool = ThreadPoolExecutor(max_workers=3, thread_name_prefix="analyze")
        try:
            labels = pool.submit(self._vision_client.detect_labels, context.raw_bytes)
            text = pool.submit(self._vision_client.detect_text, context.raw_bytes)
            colors = pool.submit(self._analyze_colors, context.raw_bytes)
            deadline = time.monotonic() + self._timeout_seconds
            context.labels = self._join(labels, deadline, "label detection")
            context.text_detections = self._join(text, deadline, "text detection")
            context.palette = self._join(colors, deadline, "color analysis")
        finally:
            pool.shutdown(wait=False, cancel_futures=True)
        Log.info(
            f"Analyzed image {context.source.name}: {len(context.labels)} labels, "
            f"{len(context.text_detections)} text detections"
        )
        return context

    def _analyze_colors(self, image_bytes: bytes) -> Palette:
        pixels = self._image_probe.raw_pixels(image_bytes)
        dominant = self._image_probe.dominant(pixels)
        return self._quantizer.quantize(pixels, dominant)

    def _join(self, future: "Future[T]", deadline: float, what: str) -> T:
        remaining = max(0.0, deadline - time.monotonic())
        try:
            return future.result(timeout=remaining)
        except FutureTimeoutError as exc:
            future.cancel()
            raise ExternalServiceTimeoutError(
                f"{what} did not finish within {self._timeout_seconds}s"
            ) from exc


class CategorizeStep(PipelineStep):
    name = "categorize"

    def __init__(self, categorizer: VisionCategorizer) -> None:
        self._categorizer = categorizer

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.metadata is None:
            raise ValueError("PipelineContext.metadata must be set before categorization")
        context.visual_elements = self._categorizer.categorize_labels(context.labels)
        context.text_content = self._categorizer.categorize_text(
            context.text_detections, context.metadata
        )
        context.composition = composition_metrics(context.text_detections, context.labels)
        return context


class ComposeResultStep(PipelineStep):
    name = "compose"

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.metadata is None:
            raise ValueError("PipelineContext.metadata must be set before composing the result")
        metadata = context.metadata
        source = context.source
        context.result = ExtractionResult(
            file_info=FileInfo(
                name=source.name,
                size=len(context.raw_bytes),
                type=source.mime_type,
                extension=source.extension.lower(),
                dimensions=Dimensions(width=metadata.width, height=metadata.height),
            ),
            analysis=Analysis(
                image_specs=raster_specs(metadata.width, metadata.height, metadata.format),
                content=ContentAnalysis(
                    visual_elements=context.visual_elements,
                    text_content=context.text_content,
                    color_scheme=self._color_scheme(context.palette),
                    composition_metrics=context.composition,
                ),
            ),
            text_extraction=flatten_raster_text(context.text_content),
        )
        return context

    @staticmethod
    def _color_scheme(palette: Palette | None) -> ColorScheme:
        if palette is None:
            return ColorScheme()
        dominant = palette.primary[0] if palette.primary else None
        background = palette.background[0] if palette.background else None
        ratio = 0.0
        if dominant is not None and background is not None:
            ratio = contrast_ratio(background, dominant)
        return ColorScheme(
            dominant=dominant,
            accent=list(palette.secondary),
            background=background,
            contrast_ratio=ratio,
        )
