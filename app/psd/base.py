from abc import ABC, abstractmethod

from app.psd.models import PsdDocument


class BasePsdParser(ABC):
    """Contract for all PSD parsing adapters."""

    @abstractmethod
    def parse(self, psd_bytes: bytes) -> PsdDocument:
        """Parse a PSD file into a LayerNode tree.

        Raises:
            ParseFailureError: if the document cannot be parsed.
        """
