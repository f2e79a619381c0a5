from pathlib import Path

import pytest

from app.processor.exceptions import FileReadError
from app.processor.file_loader import FileLoader
from app.processor.models import SourceFile


class TestLoadReturnsBytes:
    def test_returns_file_bytes(self, tmp_path: Path) -> None:
        path = tmp_path / "banner.png"
        path.write_bytes(b"\x89PNG test content")

        result = FileLoader().load(SourceFile.from_path(path))

        assert result == b"\x89PNG test content"

    def test_reads_the_given_path(self, tmp_path: Path) -> None:
        (tmp_path / "a.psd").write_bytes(b"8BPS a")
        (tmp_path / "b.psd").write_bytes(b"8BPS b")

        assert FileLoader().load(SourceFile.from_path(tmp_path / "b.psd")) == b"8BPS b"


class TestLoadErrors:
    def test_missing_file_raises(self, tmp_path: Path) -> None:
        source = SourceFile.from_path(tmp_path / "gone.png")

        with pytest.raises(FileReadError, match="File not found"):
            FileLoader().load(source)

    def test_directory_raises(self, tmp_path: Path) -> None:
        folder = tmp_path / "folder.png"
        folder.mkdir()
        source = SourceFile(path=folder, mime_type="image/png", size=0, extension=".png")

        with pytest.raises(FileReadError, match="Failed to read"):
            FileLoader().load(source)

    def test_error_code_is_invalid_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileReadError) as exc_info:
            FileLoader().load(SourceFile.from_path(tmp_path / "gone.png"))
        assert exc_info.value.code == "INVALID_FILE"


class TestSourceFile:
    def test_from_path_guesses_mime_and_size(self, tmp_path: Path) -> None:
        path = tmp_path / "banner.png"
        path.write_bytes(b"1234")

        source = SourceFile.from_path(path)

        assert source.mime_type == "image/png"
        assert source.size == 4
        assert source.extension == ".png"
