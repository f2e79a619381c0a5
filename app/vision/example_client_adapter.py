"""Example vision client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseVisionClient and register the provider in VisionClientFactory.
"""

from typing import ClassVar

from app.vision.base import BaseVisionClient
from app.vision.models import BoundingBox, LabelDetection, LabelInstance, TextDetection


class ExampleVisionAdapter(BaseVisionClient):
    """Example adapter that returns fixed detections.

    No network calls. Useful for local development and tests.
    """

    DEFAULT_LABELS: ClassVar[list[LabelDetection]] = [
        LabelDetection(
            name="Product",
            confidence=97.0,
            instances=[
                LabelInstance(
                    bounding_box=BoundingBox(left=0.55, top=0.3, width=0.35, height=0.4),
                    confidence=97.0,
                )
            ],
        ),
    ]

    DEFAULT_TEXT: ClassVar[list[TextDetection]] = [
        TextDetection(
            text="Summer Sale",
            type="LINE",
            confidence=99.0,
            bounding_box=BoundingBox(left=0.1, top=0.05, width=0.5, height=0.08),
        ),
        TextDetection(
            text="Shop now",
            type="LINE",
            confidence=98.0,
            bounding_box=BoundingBox(left=0.1, top=0.6, width=0.2, height=0.02),
        ),
    ]

    def detect_labels(self, image_bytes: bytes) -> list[LabelDetection]:
        _ = image_bytes
        return list(self.DEFAULT_LABELS)

    def detect_text(self, image_bytes: bytes) -> list[TextDetection]:
        _ = image_bytes
        return list(self.DEFAULT_TEXT)
