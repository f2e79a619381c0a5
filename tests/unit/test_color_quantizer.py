import pytest

from app.color.quantizer import ColorQuantizer, contrast_ratio, hex_to_rgb, rgb_to_hex
from app.processor.exceptions import InvalidColorFormatError


def _pixels(*runs: tuple[tuple[int, int, int], int]) -> bytes:
    data = bytearray()
    for rgb, count in runs:
        data.extend(bytes(rgb) * count)
    return bytes(data)


class TestHexConversion:
    @pytest.mark.parametrize(
        "rgb",
        [(0, 0, 0), (255, 255, 255), (18, 52, 86), (128, 0, 255), (1, 2, 3)],
    )
    def test_round_trip(self, rgb: tuple[int, int, int]) -> None:
        assert hex_to_rgb(rgb_to_hex(*rgb)) == rgb

    def test_rgb_to_hex_rounds_half_up_and_pads(self) -> None:
        assert rgb_to_hex(254.6, 0.4, 15.5) == "#ff0010"

    def test_hex_to_rgb_accepts_missing_hash_and_uppercase(self) -> None:
        assert hex_to_rgb("FFA500") == (255, 165, 0)

    @pytest.mark.parametrize("value", ["#fff", "zzzzzz", "", "#1234567"])
    def test_invalid_hex_raises(self, value: str) -> None:
        with pytest.raises(InvalidColorFormatError):
            hex_to_rgb(value)


class TestContrastRatio:
    def test_black_on_white_is_21(self) -> None:
        assert contrast_ratio("#000000", "#ffffff") == 21.0

    def test_is_symmetric(self) -> None:
        assert contrast_ratio("#336699", "#ffcc00") == contrast_ratio("#ffcc00", "#336699")

    @pytest.mark.parametrize("value", ["#000000", "#808080", "#ff0000"])
    def test_same_color_is_one(self, value: str) -> None:
        assert contrast_ratio(value, value) == 1.0

    def test_rounds_to_one_decimal(self) -> None:
        ratio = contrast_ratio("#777777", "#ffffff")
        assert ratio == round(ratio, 1)

    def test_invalid_color_raises(self) -> None:
        with pytest.raises(InvalidColorFormatError):
            contrast_ratio("red", "#ffffff")


class TestColorQuantizer:
    def test_ranks_by_frequency(self) -> None:
        pixels = _pixels(
            ((0, 0, 255), 2),
            ((255, 0, 0), 5),
            ((255, 255, 255), 1),
            ((0, 255, 0), 3),
        )
        assert ColorQuantizer.rank(pixels) == ["#ff0000", "#00ff00", "#0000ff", "#ffffff"]

    def test_ties_keep_first_appearance(self) -> None:
        pixels = _pixels(((9, 9, 9), 2), ((1, 1, 1), 2), ((5, 5, 5), 2))
        assert ColorQuantizer.rank(pixels) == ["#090909", "#010101", "#050505"]

    def test_palette_skips_two_most_frequent_for_secondary(self) -> None:
        pixels = _pixels(
            ((255, 0, 0), 5),
            ((0, 255, 0), 4),
            ((0, 0, 255), 3),
            ((0, 0, 0), 2),
            ((255, 255, 255), 1),
        )
        palette = ColorQuantizer().quantize(pixels, dominant=(250, 2, 2))

        assert palette.primary == ["#fa0202"]
        assert palette.secondary == ["#0000ff", "#000000"]
        assert palette.background == ["#ffffff"]

    def test_solid_image_has_empty_secondary(self) -> None:
        palette = ColorQuantizer().quantize(_pixels(((10, 20, 30), 50)), dominant=(10, 20, 30))

        assert palette.secondary == []
        assert palette.background == ["#0a141e"]

    def test_empty_buffer_returns_empty_lists(self) -> None:
        palette = ColorQuantizer().quantize(b"", dominant=(0, 0, 0))

        assert palette.primary == ["#000000"]
        assert palette.secondary == []
        assert palette.background == []
