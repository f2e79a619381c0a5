from app.config.settings import Settings
from app.vision.base import BaseVisionClient
from app.vision.example_client_adapter import ExampleVisionAdapter
from app.vision.rekognition_adapter import RekognitionVisionAdapter


class VisionClientFactory:
    """Creates the configured vision client adapter."""

    PROVIDERS: tuple[str, ...] = ("example", "rekognition")

    @classmethod
    def create(cls, settings: Settings) -> BaseVisionClient:
        provider = settings.vision_provider.lower()
        if provider == "example":
            return ExampleVisionAdapter()
        if provider == "rekognition":
            return RekognitionVisionAdapter(
                region=settings.aws_default_region,
                timeout_seconds=settings.vision_timeout_seconds,
                max_labels=settings.rekognition_max_labels,
                min_confidence=settings.rekognition_min_confidence,
            )
        raise ValueError(
            f"Unknown vision provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
