from app.vision.base import BaseVisionClient
from app.vision.factory import VisionClientFactory

__all__ = ["BaseVisionClient", "VisionClientFactory"]
