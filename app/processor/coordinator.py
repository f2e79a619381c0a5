from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor

from app.config.settings import Settings
from app.imaging.pillow_adapter import PillowImageProbe
from app.logging.logger import Log
from app.processor.exceptions import ExtractionError
from app.processor.models import BatchResult, SourceFile
from app.processor.psd_pipeline import PsdPipeline
from app.processor.raster_pipeline import RasterPipeline, build_raster_pipeline
from app.psd.psd_tools_adapter import PsdToolsParser
from app.vision.base import BaseVisionClient
from app.vision.factory import VisionClientFactory

PSD_EXTENSION = ".psd"


def partition(files: Iterable[SourceFile]) -> tuple[list[SourceFile], list[SourceFile]]:
    """Split into (raster, psd) by the literal, case-sensitive ``.psd`` suffix."""
    images: list[SourceFile] = []
    psds: list[SourceFile] = []
    for source in files:
        (psds if source.path.suffix == PSD_EXTENSION else images).append(source)
    return images, psds


class ExtractionCoordinator:
    """Routes uploaded files to the raster and PSD pipelines and gathers both batches."""

    def __init__(self, raster_pipeline: RasterPipeline, psd_pipeline: PsdPipeline) -> None:
        self._raster_pipeline = raster_pipeline
        self._psd_pipeline = psd_pipeline

    def extract(self, uploads: Mapping[str, SourceFile]) -> list[BatchResult]:
        """Return ``[image_batch, psd_batch]``; both are always present."""
        images, psds = partition(uploads.values())
        Log.info(f"Extracting {len(images)} image(s) and {len(psds)} PSD file(s)")
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="coordinator") as pool:
            image_batch = pool.submit(
                self._run, RasterPipeline.BATCH_TYPE, self._raster_pipeline.process_batch, images
            )
            psd_batch = pool.submit(
                self._run, PsdPipeline.BATCH_TYPE, self._psd_pipeline.process_batch, psds
            )
            return [image_batch.result(), psd_batch.result()]

    @staticmethod
    def _run(
        batch_type: str,
        process_batch: Callable[[list[SourceFile]], BatchResult],
        sources: list[SourceFile],
    ) -> BatchResult:
        try:
            return process_batch(sources)
        except Exception as exc:
            Log.error("Batch aborted", batch=batch_type, error=exc)
            code = exc.code if isinstance(exc, ExtractionError) else ExtractionError.code
            return BatchResult.failed(batch_type, str(exc), code)


def build_coordinator(
    settings: Settings,
    vision_client: BaseVisionClient | None = None,
) -> ExtractionCoordinator:
    """Composition root: the vision client is created once and shared by all requests."""
    client = vision_client or VisionClientFactory.create(settings)
    raster_pipeline = build_raster_pipeline(
        settings,
        vision_client=client,
        image_probe=PillowImageProbe(),
    )
    psd_pipeline = PsdPipeline(parser=PsdToolsParser())
    return ExtractionCoordinator(raster_pipeline=raster_pipeline, psd_pipeline=psd_pipeline)
