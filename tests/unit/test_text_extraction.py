from app.processor.models import Position, TextContent, TextItem
from app.processor.text_extraction import flatten_psd_text, flatten_raster_text, normalize_whitespace
from app.psd.models import Bounds, TextElement, TextStyle
from app.psd.text_classifier import classify_text_elements
from app.psd.walker import WalkResult


def _item(text: str, y: int, font_size: int, x: int = 10) -> TextItem:
    return TextItem(text=text, position=Position(x, y, 100, 20), confidence=99.0, font_size=font_size)


def _element(layer_name: str, text: str, group: str | None = None) -> TextElement:
    return TextElement(
        layer_name=layer_name,
        path=layer_name,
        text=text,
        position=Bounds(),
        style=TextStyle(),
        group=group,
    )


def test_normalize_whitespace() -> None:
    assert normalize_whitespace("  Save \n 20%\t today ") == "Save 20% today"


class TestFlattenRasterText:
    def test_buckets_become_fields(self) -> None:
        content = TextContent(
            headline=[_item("Summer  Sale", 50, 60)],
            body_text=[
                _item("Short body", 300, 20),
                _item("This line is certainly longer than thirty", 400, 18),
                _item("Largest body line which exceeds thirty chars", 500, 30),
            ],
            cta=[_item("Shop now", 600, 15)],
            disclaimers=[_item("Terms apply", 900, 8)],
        )

        result = flatten_raster_text(content)

        assert result.headline == "Summer Sale"
        assert result.description == "Largest body line which exceeds thirty chars"
        assert result.primary_text == "Short body This line is certainly longer than thirty Terms apply"
        assert result.call_to_action == "Shop now"

    def test_all_text_is_in_reading_order(self) -> None:
        content = TextContent(
            headline=[_item("Top", 10, 40)],
            cta=[_item("Bottom", 800, 15)],
            body_text=[_item("Right", 300, 16, x=500), _item("Left", 300, 16, x=20)],
        )

        assert flatten_raster_text(content).content_text.all_text == "Top Left Right Bottom"

    def test_none_content(self) -> None:
        result = flatten_raster_text(None)

        assert result.primary_text == ""
        assert result.content_text.all_text == ""


class TestFlattenPsdText:
    def test_uses_classified_fields_and_groups(self) -> None:
        elements = [
            _element("<FR> Soldes", "Soldes d'ete", group="Promo"),
            _element("Headline", "Save 20%", group="Promo"),
            _element("CTA", "Shop now"),
        ]
        walk = WalkResult(text_elements=elements, text_by_group={"Promo": ["Soldes d'ete", "Save 20%"]})

        result = flatten_psd_text(walk, classify_text_elements(elements))

        assert result.primary_text == "Soldes"
        assert result.headline == "Save 20%"
        assert result.call_to_action == "Shop now"
        assert result.content_text.all_text == "Soldes d'ete Save 20% Shop now"
        assert result.content_text.by_group == {"Promo": ["Soldes d'ete", "Save 20%"]}

    def test_primary_falls_back_to_all_text(self) -> None:
        elements = [_element("Copy 1", "Fresh  picks"), _element("Copy 2", "daily")]
        walk = WalkResult(text_elements=elements)

        result = flatten_psd_text(walk, classify_text_elements(elements))

        assert result.primary_text == "Fresh picks daily"
        assert result.headline == ""
