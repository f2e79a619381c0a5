"""FastAPI entrypoint: accepts creative uploads and returns extraction batches."""

import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from pathlib import Path
from typing import Any

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.responses import JSONResponse

from app.api.uploads import UploadStore
from app.config.settings import Settings
from app.logging.logger import Log
from app.processor.coordinator import ExtractionCoordinator, build_coordinator
from app.processor.exceptions import ExtractionError

ERROR_STATUS: dict[str, int] = {
    "NO_FILES_UPLOADED": 400,
    "INVALID_FILE_TYPE": 400,
    "FILE_TOO_LARGE": 400,
    "INVALID_FILE": 422,
    "EXTRACTION_FAILED": 422,
}


def error_body(message: str, code: str, exc: Exception, settings: Settings) -> dict[str, Any]:
    error: dict[str, Any] = {"message": message, "code": code}
    if settings.app_env == "development":
        error["details"] = "".join(traceback.format_exception(exc))
    return {"status": "error", "error": error}


def create_app(
    settings: Settings | None = None,
    coordinator: ExtractionCoordinator | None = None,
) -> FastAPI:
    """Build the application. The coordinator is created once per process."""
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.coordinator = coordinator or build_coordinator(settings)
        Log.info("Extraction coordinator ready")
        yield

    app = FastAPI(
        title="Creative Extractor",
        description="Text, color and layout extraction for raster and PSD creatives",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.uploads = UploadStore(
        upload_dir=Path(settings.upload_dir),
        max_size_bytes=settings.max_upload_size_mb * 1024 * 1024,
        allowed_extensions=settings.allowed_extensions,
    )

    @app.exception_handler(ExtractionError)
    async def extraction_error_handler(request: Request, exc: ExtractionError) -> JSONResponse:
        Log.warning("Request rejected", path=request.url.path, code=exc.code, error=exc.message)
        return JSONResponse(
            status_code=ERROR_STATUS.get(exc.code, 500),
            content=error_body(exc.message, exc.code, exc, settings),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        Log.error("Unhandled error", path=request.url.path, error=repr(exc))
        return JSONResponse(
            status_code=500,
            content=error_body("Internal server error", "INTERNAL_SERVER_ERROR", exc, settings),
        )

    @app.get("/health", summary="Service health check")
    def health_check() -> dict[str, str]:
        return {"status": "ok", "service": "creative-extractor"}

    @app.post("/analyse", summary="Extract text, colors and layout from creatives")
    def analyse(files: list[UploadFile] | None = File(default=None)) -> list[dict[str, Any]]:
        uploads: UploadStore = app.state.uploads
        sources = uploads.save(files)
        try:
            batches = app.state.coordinator.extract(sources)
        finally:
            uploads.cleanup(sources.values())
        return [asdict(batch) for batch in batches]

    return app
