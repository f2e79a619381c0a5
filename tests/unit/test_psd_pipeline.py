from pathlib import Path
from unittest.mock import MagicMock

import pytest

from app.processor.exceptions import ParseFailureError
from app.processor.models import SourceFile
from app.processor.psd_pipeline import PSD_MIME_TYPE, PsdPipeline
from app.psd.base import BasePsdParser
from app.psd.models import Bounds, LayerKind, LayerNode, PsdDocument, TextPayload


def _text(name: str, value: str) -> LayerNode:
    return LayerNode(
        name=name,
        kind=LayerKind.TEXT,
        bounds=Bounds(20, 40, 80, 400),
        text=TextPayload(value=value, font="Helvetica", size=36.0),
    )


def _document(*children: LayerNode, width: int = 1200, height: int = 628) -> PsdDocument:
    return PsdDocument(width=width, height=height, root=LayerNode(name="", kind=LayerKind.GROUP, children=children))


@pytest.fixture()
def parser() -> MagicMock:
    return MagicMock(spec=BasePsdParser)


def _source(tmp_path: Path, name: str = "promo.psd") -> SourceFile:
    path = tmp_path / name
    path.write_bytes(b"8BPS fake")
    return SourceFile(path=path, mime_type=None, size=9, extension=".psd")


class TestProcessFile:
    def test_headline_layer_inside_group(self, tmp_path: Path, parser: MagicMock) -> None:
        promo = LayerNode(name="Promo", kind=LayerKind.GROUP, children=(_text("Headline Copy", "Save 20%"),))
        parser.parse.return_value = _document(promo)

        result = PsdPipeline(parser).process_file(_source(tmp_path))

        assert result.succeeded
        assert result.text_extraction.headline == "Save 20%"
        layers = result.analysis.content.layers
        assert len(layers) == 1
        assert layers[0].type == "text"
        assert result.analysis.content.groups[0].name == "Promo"
        assert result.text_extraction.content_text.by_group == {"Promo": ["Save 20%"]}
        parser.parse.assert_called_once_with(b"8BPS fake")

    def test_file_info_and_specs(self, tmp_path: Path, parser: MagicMock) -> None:
        parser.parse.return_value = _document()

        result = PsdPipeline(parser).process_file(_source(tmp_path))

        assert result.file_info.type == PSD_MIME_TYPE
        assert result.file_info.extension == ".psd"
        assert result.file_info.size == 9
        specs = result.analysis.image_specs
        assert specs.format == "psd"
        assert specs.aspect_ratio == 1.91
        assert specs.size_category == "medium"

    def test_text_buckets_follow_layer_names(self, tmp_path: Path, parser: MagicMock) -> None:
        parser.parse.return_value = _document(
            _text("<FR> Bonjour", "Bonjour"),
            _text("CTA", "Shop now"),
            _text("Legal", "Terms apply"),
        )

        result = PsdPipeline(parser).process_file(_source(tmp_path))

        text_content = result.analysis.content.text_content
        assert [e.text for e in text_content.cta] == ["Shop now"]
        assert [e.text for e in text_content.body_text] == ["Bonjour", "Terms apply"]
        assert result.text_extraction.primary_text == "Bonjour"
        assert result.text_extraction.call_to_action == "Shop now"

    def test_color_scheme_uses_first_color_as_dominant(self, tmp_path: Path, parser: MagicMock) -> None:
        parser.parse.return_value = _document(
            LayerNode(name="Bg", kind=LayerKind.SHAPE, solid_color=(255, 255, 255)),
            LayerNode(name="Accent", kind=LayerKind.SHAPE, fill_color=(255, 0, 0)),
            LayerNode(name="Accent 2", kind=LayerKind.SHAPE, fill_color=(0, 0, 0)),
        )

        scheme = PsdPipeline(parser).process_file(_source(tmp_path)).analysis.content.color_scheme

        assert scheme.dominant == "#ffffff"
        assert scheme.accent == ["#ff0000", "#000000"]

    def test_parse_failure_becomes_placeholder(self, tmp_path: Path, parser: MagicMock) -> None:
        parser.parse.side_effect = ParseFailureError("psd-tools parsing failed: bad header")

        result = PsdPipeline(parser).process_file(_source(tmp_path))

        assert not result.succeeded
        assert result.file_info.code == "INVALID_FILE"
        assert result.file_info.error == "psd-tools parsing failed: bad header"


class TestProcessBatch:
    def test_one_bad_document_does_not_stop_the_rest(self, tmp_path: Path, parser: MagicMock) -> None:
        parser.parse.side_effect = [ParseFailureError("bad"), _document(_text("Headline", "Hi"))]
        sources = [_source(tmp_path, "a.psd"), _source(tmp_path, "b.psd")]

        batch = PsdPipeline(parser).process_batch(sources)

        assert batch.type == "psd"
        assert batch.processed_count == 2
        assert batch.successful_count == 1
        assert batch.results[0].file_info.error == "bad"
        assert batch.results[1].text_extraction.headline == "Hi"

    def test_missing_file_is_isolated(self, tmp_path: Path, parser: MagicMock) -> None:
        parser.parse.return_value = _document()
        missing = SourceFile(path=tmp_path / "gone.psd", mime_type=None, size=0, extension=".psd")

        batch = PsdPipeline(parser).process_batch([missing, _source(tmp_path)])

        assert batch.successful_count == 1
        assert batch.results[0].file_info.code == "INVALID_FILE"
        parser.parse.assert_called_once()

    def test_empty_batch(self, parser: MagicMock) -> None:
        batch = PsdPipeline(parser).process_batch([])

        assert batch.processed_count == 0
        parser.parse.assert_not_called()
