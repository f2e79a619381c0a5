from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    ReadTimeoutError,
)

from app.processor.exceptions import ExternalServiceError, ExternalServiceTimeoutError
from app.vision.base import BaseVisionClient
from app.vision.models import BoundingBox, LabelDetection, LabelInstance, TextDetection


class RekognitionVisionAdapter(BaseVisionClient):
    """Vision adapter built on AWS Rekognition DetectLabels / DetectText."""

    def __init__(
        self,
        *,
        region: str,
        timeout_seconds: int,
        max_labels: int = 20,
        min_confidence: float = 80.0,
    ) -> None:
        self._client = boto3.client(
            "rekognition",
            region_name=region,
            config=Config(
                connect_timeout=timeout_seconds,
                read_timeout=timeout_seconds,
                retries={"max_attempts": 0},
            ),
        )
        self._max_labels = max_labels
        self._min_confidence = min_confidence

    def detect_labels(self, image_bytes: bytes) -> list[LabelDetection]:
        response = self._call(
            "detect_labels",
            Image={"Bytes": image_bytes},
            MaxLabels=self._max_labels,
            MinConfidence=self._min_confidence,
        )
        try:
            return [self._to_label(raw) for raw in response.get("Labels", [])]
        except (KeyError, TypeError, ValueError) as exc:
            raise ExternalServiceError(f"Malformed DetectLabels response: {exc}") from exc

    def detect_text(self, image_bytes: bytes) -> list[TextDetection]:
        response = self._call("detect_text", Image={"Bytes": image_bytes})
        try:
            return [self._to_text(raw) for raw in response.get("TextDetections", [])]
        except (KeyError, TypeError, ValueError) as exc:
            raise ExternalServiceError(f"Malformed DetectText response: {exc}") from exc

    def _call(self, operation: str, **params: Any) -> dict[str, Any]:
        try:
            return getattr(self._client, operation)(**params)
        except (ConnectTimeoutError, ReadTimeoutError) as exc:
            raise ExternalServiceTimeoutError(
                f"Rekognition {operation} timed out: {exc}"
            ) from exc
        except (ClientError, BotoCoreError) as exc:
            raise ExternalServiceError(f"Rekognition {operation} failed: {exc}") from exc

    @staticmethod
    def _to_box(raw: dict[str, Any]) -> BoundingBox:
        return BoundingBox(
            left=float(raw.get("Left", 0.0)),
            top=float(raw.get("Top", 0.0)),
            width=float(raw.get("Width", 0.0)),
            height=float(raw.get("Height", 0.0)),
        )

    def _to_label(self, raw: dict[str, Any]) -> LabelDetection:
        instances = [
            LabelInstance(
                bounding_box=self._to_box(instance["BoundingBox"]),
                confidence=float(instance.get("Confidence", 0.0)),
            )
            for instance in raw.get("Instances", [])
            if instance.get("BoundingBox")
        ]
        return LabelDetection(
            name=str(raw["Name"]),
            confidence=float(raw.get("Confidence", 0.0)),
            instances=instances,
        )

    def _to_text(self, raw: dict[str, Any]) -> TextDetection:
        return TextDetection(
            text=str(raw["DetectedText"]),
            type=str(raw["Type"]),
            confidence=float(raw.get("Confidence", 0.0)),
            bounding_box=self._to_box(raw["Geometry"]["BoundingBox"]),
        )
