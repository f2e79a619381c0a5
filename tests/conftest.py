import io
from pathlib import Path

import pytest
from PIL import Image


def make_png_bytes(
    size: tuple[int, int] = (100, 50),
    color: tuple[int, int, int] = (255, 0, 0),
) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def solid_png_bytes() -> bytes:
    """A 100x50 solid red PNG."""
    return make_png_bytes()


@pytest.fixture()
def two_tone_png_bytes() -> bytes:
    """A 10x10 PNG: left 6 columns blue, right 4 columns white."""
    image = Image.new("RGB", (10, 10), (255, 255, 255))
    for x in range(6):
        for y in range(10):
            image.putpixel((x, y), (0, 0, 255))
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def image_file(tmp_path: Path, solid_png_bytes: bytes) -> Path:
    path = tmp_path / "banner.png"
    path.write_bytes(solid_png_bytes)
    return path
