from concurrent.futures import ThreadPoolExecutor

from app.color.quantizer import ColorQuantizer
from app.config.settings import Settings
from app.imaging.base import BaseImageProbe
from app.logging.logger import Log
from app.processor.exceptions import ExtractionError
from app.processor.file_loader import FileLoader
from app.processor.models import BatchResult, ExtractionResult, SourceFile
from app.processor.pipeline import PipelineContext, PipelineStep
from app.processor.steps import (
    AnalyzeImageStep,
    CategorizeStep,
    ComposeResultStep,
    LoadImageStep,
    ProbeImageStep,
)
from app.vision.base import BaseVisionClient
from app.vision.categorizer import VisionCategorizer


class RasterPipeline:
    """Runs the raster steps for every image of a batch.

    A failing file becomes a placeholder result; the rest of the batch continues.
    Output order matches input order.
    """

    BATCH_TYPE = "image"

    def __init__(self, steps: list[PipelineStep], max_workers: int = 4) -> None:
        self._steps = steps
        self._max_workers = max(1, max_workers)

    def process_file(self, source: SourceFile) -> ExtractionResult:
        name = source.name
        context = PipelineContext(source=source)
        stage = "start"
        try:
            for step in self._steps:
                stage = step.name
                context = step.run(context)
        except ExtractionError as exc:
            Log.error("Image extraction failed", file=name, stage=stage, error=exc)
            return ExtractionResult.failed(source, exc.message, exc.code)
        except Exception as exc:
            Log.error("Image extraction failed", file=name, stage=stage, error=exc)
            return ExtractionResult.failed(source, str(exc), ExtractionError.code)

        if context.result is None:
            raise ValueError("Raster pipeline finished without composing a result")
        Log.info(f"Image {name} processed successfully")
        return context.result

    def process_batch(self, sources: list[SourceFile]) -> BatchResult:
        if not sources:
            return BatchResult.from_results(self.BATCH_TYPE, [])
        workers = min(self._max_workers, len(sources))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="raster") as pool:
            results = list(pool.map(self.process_file, sources))
        batch = BatchResult.from_results(self.BATCH_TYPE, results)
        Log.info(
            f"Raster batch done: {batch.successful_count}/{batch.processed_count} succeeded"
        )
        return batch


def build_raster_pipeline(
    settings: Settings,
    vision_client: BaseVisionClient,
    image_probe: BaseImageProbe,
    file_loader: FileLoader | None = None,
) -> RasterPipeline:
    """Build a RasterPipeline with all required steps."""
    steps: list[PipelineStep] = [
        LoadImageStep(file_loader or FileLoader()),
        ProbeImageStep(image_probe),
        AnalyzeImageStep(
            vision_client=vision_client,
            image_probe=image_probe,
            quantizer=ColorQuantizer(),
            timeout_seconds=settings.vision_timeout_seconds,
        ),
        CategorizeStep(VisionCategorizer()),
        ComposeResultStep(),
    ]
    return RasterPipeline(steps=steps, max_workers=settings.max_workers)
