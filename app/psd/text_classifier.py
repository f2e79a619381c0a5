"""Layer-name conventions used by creative teams to tag text layers."""

from dataclasses import dataclass, field

from app.psd.models import TextElement

PRIMARY_MARKER = "<FR>"
HEADLINE_KEYWORDS = ("headline",)
CTA_KEYWORDS = ("cta",)
DESCRIPTION_KEYWORDS = ("description",)


def classify_layer_name(name: str) -> str:
    """Return one of primary / headline / cta / description / body."""
    if PRIMARY_MARKER in name:
        return "primary"
    lowered = name.lower()
    if any(keyword in lowered for keyword in HEADLINE_KEYWORDS):
        return "headline"
    if any(keyword in lowered for keyword in CTA_KEYWORDS):
        return "cta"
    if any(keyword in lowered for keyword in DESCRIPTION_KEYWORDS):
        return "description"
    return "body"


def strip_primary_marker(name: str) -> str:
    return name.replace(PRIMARY_MARKER, "").strip()


@dataclass
class ClassifiedText:
    """Text elements bucketed by layer name; scalar fields keep the first match."""

    primary_text: str = ""
    headline: str = ""
    description: str = ""
    call_to_action: str = ""
    headlines: list[TextElement] = field(default_factory=list)
    ctas: list[TextElement] = field(default_factory=list)
    body: list[TextElement] = field(default_factory=list)


def classify_text_elements(elements: list[TextElement]) -> ClassifiedText:
    result = ClassifiedText()
    for element in elements:
        bucket = classify_layer_name(element.layer_name)
        if bucket == "primary":
            if not result.primary_text:
                result.primary_text = strip_primary_marker(element.layer_name)
            result.body.append(element)
        elif bucket == "headline":
            result.headline = result.headline or element.text
            result.headlines.append(element)
        elif bucket == "cta":
            result.call_to_action = result.call_to_action or element.text
            result.ctas.append(element)
        elif bucket == "description":
            result.description = result.description or element.text
            result.body.append(element)
        else:
            result.body.append(element)
    return result
