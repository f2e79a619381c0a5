from collections.abc import Iterable
from pathlib import Path
from uuid import uuid4

from fastapi import UploadFile

from app.logging.logger import Log
from app.processor.exceptions import InvalidInputError
from app.processor.models import SourceFile


class UploadStore:
    """Validates multipart uploads, spools them to disk and removes them afterwards."""

    def __init__(
        self,
        upload_dir: Path,
        max_size_bytes: int,
        allowed_extensions: Iterable[str],
    ) -> None:
        self._upload_dir = upload_dir
        self._max_size_bytes = max_size_bytes
        self._allowed_extensions = {ext.lower() for ext in allowed_extensions}

    def save(self, files: list[UploadFile] | None) -> dict[str, SourceFile]:
        """Persist uploads and return them keyed by field position.

        Raises:
            InvalidInputError: with code NO_FILES_UPLOADED, INVALID_FILE_TYPE,
                FILE_TOO_LARGE or INVALID_FILE. Nothing is left on disk.
        """
        if not files:
            raise InvalidInputError("No files uploaded", code="NO_FILES_UPLOADED")

        for upload in files:
            self._check_type(upload)

        self._upload_dir.mkdir(parents=True, exist_ok=True)
        saved: dict[str, SourceFile] = {}
        try:
            for index, upload in enumerate(files):
                saved[f"files[{index}]"] = self._write(upload)
        except Exception:
            self.cleanup(saved.values())
            raise
        return saved

    def cleanup(self, sources: Iterable[SourceFile]) -> None:
        """Delete spooled files; failures are logged, never raised."""
        for source in sources:
            try:
                source.path.unlink()
                Log.info(f"Successfully deleted {source.path}")
            except OSError as exc:
                Log.error(f"Error deleting {source.path}: {exc}")

    def _check_type(self, upload: UploadFile) -> None:
        extension = Path(upload.filename or "").suffix
        if extension.lower() not in self._allowed_extensions:
            raise InvalidInputError(
                f"File type '{extension or upload.filename}' is not supported. "
                f"Allowed: {sorted(self._allowed_extensions)}",
                code="INVALID_FILE_TYPE",
            )

    def _write(self, upload: UploadFile) -> SourceFile:
        content = upload.file.read(self._max_size_bytes + 1)
        name = upload.filename or ""
        if not content:
            raise InvalidInputError(f"Uploaded file '{name}' is empty", code="INVALID_FILE")
        if len(content) > self._max_size_bytes:
            raise InvalidInputError(
                f"File '{name}' exceeds maximum allowed size of "
                f"{self._max_size_bytes // (1024 * 1024)} MB",
                code="FILE_TOO_LARGE",
            )
        extension = Path(name).suffix
        path = self._upload_dir / f"{uuid4().hex}{extension}"
        path.write_bytes(content)
        return SourceFile(
            path=path,
            mime_type=upload.content_type,
            size=len(content),
            extension=extension,
            original_name=name or None,
        )
