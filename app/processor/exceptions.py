
class ExtractionError(Exception):
    """Base exception for all extraction errors.

    ``code`` is the caller-facing error code used in response bodies.
    """

    code = "EXTRACTION_FAILED"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class InvalidInputError(ExtractionError):
    """Raised when an upload is missing, empty, oversized or of the wrong type."""

    code = "INVALID_FILE"


class FileReadError(ExtractionError):
    """Raised when a file cannot be read from disk."""

    code = "INVALID_FILE"


class ParseFailureError(ExtractionError):
    """Raised when a PSD document cannot be parsed."""

    code = "INVALID_FILE"


class ExternalServiceError(ExtractionError):
    """Raised when the vision service call fails or returns malformed data."""


class ExternalServiceTimeoutError(ExternalServiceError):
    """Raised when the vision service does not answer within the configured timeout."""


class InvalidColorFormatError(ExtractionError):
    """Raised when a hex color cannot be parsed as 6 hex digits."""
