"""Flattens bucketed text into the ``text_extraction`` section of a result."""

import re

from app.processor.models import ContentText, TextContent, TextExtraction, TextItem
from app.psd.text_classifier import ClassifiedText
from app.psd.walker import WalkResult

DESCRIPTION_MIN_LENGTH = 30

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value.strip())


def _texts(items: list) -> list[str]:
    return [item.text for item in items]


def _reading_key(item: TextItem) -> tuple[int, int]:
    return item.position.y, item.position.x


def flatten_raster_text(content: TextContent | None) -> TextExtraction:
    """Build text_extraction from raster text buckets.

    Body lines are visited largest font first: the first line longer than
    DESCRIPTION_MIN_LENGTH becomes the description, the rest and all
    disclaimers go to primary_text.
    """
    if content is None:
        return TextExtraction()

    primary_parts: list[str] = []
    description = ""
    for item in sorted(content.body_text, key=lambda b: b.font_size, reverse=True):
        if len(item.text) > DESCRIPTION_MIN_LENGTH and not description:
            description = item.text
        else:
            primary_parts.append(item.text)
    primary_parts.extend(_texts(content.disclaimers))

    lines = content.headline + content.body_text + content.cta + content.disclaimers
    reading_order = sorted(lines, key=_reading_key)
    return TextExtraction(
        primary_text=normalize_whitespace(" ".join(primary_parts)),
        headline=normalize_whitespace(" ".join(_texts(content.headline))),
        description=normalize_whitespace(description),
        call_to_action=normalize_whitespace(" ".join(_texts(content.cta))),
        content_text=ContentText(all_text=normalize_whitespace(" ".join(_texts(reading_order)))),
    )


def flatten_psd_text(walk: WalkResult, classified: ClassifiedText) -> TextExtraction:
    """Build text_extraction from name-classified PSD text layers."""
    all_text = normalize_whitespace(walk.all_text)
    return TextExtraction(
        primary_text=classified.primary_text or all_text,
        headline=classified.headline,
        description=classified.description,
        call_to_action=classified.call_to_action,
        content_text=ContentText(
            all_text=all_text,
            by_group={name: list(texts) for name, texts in walk.text_by_group.items()},
        ),
    )
