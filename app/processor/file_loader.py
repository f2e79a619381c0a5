from app.processor.exceptions import FileReadError
from app.processor.models import SourceFile


class FileLoader:
    """Validates a source file path and reads its bytes."""

    def load(self, source: SourceFile) -> bytes:
        """Read file bytes from disk.

        Raises:
            FileReadError: if the path is missing or the file cannot be read.
        """
        path = source.path
        if not str(path) or not path.exists():
            raise FileReadError(f"File not found: {path}")
        try:
            return path.read_bytes()
        except OSError as exc:
            raise FileReadError(f"Failed to read file {path.name}: {exc}") from exc
