import io
from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from psd_tools import PSDImage

from app.api.main import create_app
from app.config.settings import Settings


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def test_settings(upload_dir: Path) -> Settings:
    return Settings(
        app_env="test",
        upload_dir=str(upload_dir),
        vision_provider="example",
        vision_timeout_seconds=5,
    )


@pytest.fixture
def client(test_settings: Settings) -> Generator[TestClient, None, None]:
    with TestClient(create_app(test_settings)) as test_client:
        yield test_client


@pytest.fixture
def banner_png_bytes() -> bytes:
    """1000x800 white banner with a blue block in the lower right."""
    image = Image.new("RGB", (1000, 800), (255, 255, 255))
    image.paste((0, 0, 255), (600, 400, 1000, 800))
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def flat_psd_bytes() -> bytes:
    psd = PSDImage.frompil(Image.new("RGB", (1200, 628), (255, 0, 0)))
    buf = io.BytesIO()
    psd.save(buf)
    return buf.getvalue()
