from abc import ABC, abstractmethod

from app.vision.models import LabelDetection, TextDetection


class BaseVisionClient(ABC):
    """Contract for all vision service adapters."""

    @abstractmethod
    def detect_labels(self, image_bytes: bytes) -> list[LabelDetection]:
        """Detect objects and scene labels.

        Args:
            image_bytes: Encoded image content (JPEG, PNG, ...).

        Returns:
            Labels with normalized instance boxes.

        Raises:
            ExternalServiceError: if the call fails or the response is malformed.
        """

    @abstractmethod
    def detect_text(self, image_bytes: bytes) -> list[TextDetection]:
        """Detect LINE and WORD text with normalized boxes.

        Raises:
            ExternalServiceError: if the call fails or the response is malformed.
        """
