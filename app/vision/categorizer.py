"""Buckets raw vision detections into creative-analysis categories.

Labels are split into people / products / branding / background elements by
keyword. OCR lines are split into headline / disclaimer / CTA / body text
using estimated font size, vertical position and a CTA keyword pattern.
"""

import math
import re

from app.imaging.models import ImageMetadata
from app.processor.models import Position, TextContent, TextItem, VisualElement, VisualElements
from app.vision.models import BoundingBox, LabelDetection, TextDetection

PEOPLE_KEYWORDS = ("Person", "Human")
PRODUCT_KEYWORDS = ("Product", "Item", "Goods", "Package", "Container")
BRANDING_KEYWORDS = ("Logo", "Brand", "Symbol", "Trademark")

CTA_KEYWORDS = (
    "buy", "shop", "get", "order", "call", "click", "visit", "learn",
    "discover", "find", "see", "watch", "sign up", "join", "start",
)
CTA_PATTERN = re.compile(r"\b(" + "|".join(CTA_KEYWORDS) + r")\b", re.IGNORECASE)
CTA_MAX_LENGTH = 35

MIN_LINE_CONFIDENCE = 90.0
FONT_SIZE_FACTOR = 0.75
HEADLINE_MIN_FONT_SIZE = 24
HEADLINE_MAX_Y = 0.3
DISCLAIMER_MAX_FONT_SIZE = 12
DISCLAIMER_MIN_Y = 0.8


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def estimate_font_size(height_px: float) -> int:
    return round_half_up(height_px * FONT_SIZE_FACTOR)


def is_call_to_action(text: str) -> bool:
    return bool(CTA_PATTERN.search(text)) and len(text) < CTA_MAX_LENGTH


def classify_label(name: str) -> str:
    """Return the visual bucket name for a label."""
    if any(keyword in name for keyword in PEOPLE_KEYWORDS):
        return "people"
    if any(keyword in name for keyword in PRODUCT_KEYWORDS):
        return "products"
    if any(keyword in name for keyword in BRANDING_KEYWORDS):
        return "branding"
    return "background_elements"


def classify_line(font_size: int, y_ratio: float, text: str) -> str:
    """Return the text bucket name; first matching rule wins."""
    if font_size > HEADLINE_MIN_FONT_SIZE and y_ratio < HEADLINE_MAX_Y:
        return "headline"
    if font_size < DISCLAIMER_MAX_FONT_SIZE and y_ratio > DISCLAIMER_MIN_Y:
        return "disclaimers"
    if is_call_to_action(text):
        return "cta"
    return "body_text"


class VisionCategorizer:
    """Classifies label and text detections for one image."""

    def categorize_labels(self, labels: list[LabelDetection]) -> VisualElements:
        elements = VisualElements()
        for label in labels:
            bucket = getattr(elements, classify_label(label.name))
            bucket.append(self._to_visual_element(label))
        return elements

    def categorize_text(
        self,
        detections: list[TextDetection],
        metadata: ImageMetadata,
    ) -> TextContent:
        content = TextContent()
        for detection in detections:
            if detection.type != "LINE" or detection.confidence <= MIN_LINE_CONFIDENCE:
                continue
            item = self._to_text_item(detection, metadata)
            y_ratio = item.position.y / metadata.height if metadata.height else 0.0
            bucket = getattr(content, classify_line(item.font_size, y_ratio, item.text))
            bucket.append(item)
        return content

    @staticmethod
    def _to_visual_element(label: LabelDetection) -> VisualElement:
        box = label.primary_box
        position = None
        if box is not None:
            position = Position(
                x=round_half_up(box.left * 100),
                y=round_half_up(box.top * 100),
                width=round_half_up(box.width * 100),
                height=round_half_up(box.height * 100),
            )
        return VisualElement(
            name=label.name,
            confidence=label.confidence,
            position=position,
            size=box.area if box is not None else 0,
        )

    @staticmethod
    def _to_text_item(detection: TextDetection, metadata: ImageMetadata) -> TextItem:
        box: BoundingBox = detection.bounding_box
        return TextItem(
            text=detection.text,
            position=Position(
                x=round_half_up(box.left * metadata.width),
                y=round_half_up(box.top * metadata.height),
                width=round_half_up(box.width * metadata.width),
                height=round_half_up(box.height * metadata.height),
            ),
            confidence=detection.confidence,
            font_size=estimate_font_size(box.height * metadata.height),
        )
