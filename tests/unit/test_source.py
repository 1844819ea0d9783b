"""Tests for image sources."""

from io import BytesIO
from pathlib import Path
from unittest.mock import MagicMock

import numpy as np
import pytest
import requests
from PIL import Image

from fontscraper.config import SourceConfig
from fontscraper.exceptions import AcquisitionError, InvalidSourceUrlError
from fontscraper.io.source import (
    DirectoryImageSource,
    HttpImageSource,
    char_filename,
    decode_image,
    extract_base_url,
)

BASE_URL = "https://fonts.example.com/render/123/font/0123456789abcdef0123456789abcdef"


def png_bytes(width: int = 4, height: int = 3, mode: str = "RGB") -> bytes:
    buffer = BytesIO()
    Image.new(mode, (width, height), "white").save(buffer, format="PNG")
    return buffer.getvalue()


def mock_session(status_code: int = 200, content: bytes = b"") -> MagicMock:
    session = MagicMock(spec=requests.Session)
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    session.get.return_value = response
    return session


class TestExtractBaseUrl:
    """Tests for render URL validation."""

    def test_strips_query(self):
        assert extract_base_url(f"{BASE_URL}?rt=A&rs=256") == BASE_URL

    def test_strips_whitespace_and_fragment(self):
        assert extract_base_url(f"  {BASE_URL}#preview ") == BASE_URL

    @pytest.mark.parametrize(
        "url",
        [
            "",
            "not a url",
            "https://fonts.example.com/render/abc/font/0123456789abcdef0123456789abcdef",
            "https://fonts.example.com/render/123/font/0123",
            "https://fonts.example.com/render/123/font/0123456789abcdef0123456789abcdeg",
            "https://fonts.example.com/render/123/font/0123456789abcdef0123456789abcdef/extra",
            "/render/123/font/0123456789abcdef0123456789abcdef",
        ],
    )
    def test_rejects_invalid(self, url):
        with pytest.raises(InvalidSourceUrlError, match="Expected format"):
            extract_base_url(url)


class TestDecodeImage:
    """Tests for decode_image."""

    def test_converts_to_rgba(self):
        pixels = decode_image(png_bytes(5, 2, mode="RGB"))
        assert pixels.shape == (2, 5, 4)
        assert pixels.dtype == np.uint8
        assert (pixels[:, :, 3] == 255).all()
        assert pixels.flags.writeable

    def test_garbage(self):
        with pytest.raises(OSError):
            decode_image(b"not an image")


class TestCharFilename:
    def test_names(self):
        assert char_filename("A") == "U+0041.png"
        assert char_filename(" ") == "U+0020.png"
        assert char_filename("\U0001f600") == "U+1F600.png"


class TestHttpImageSource:
    """Tests for HttpImageSource."""

    def test_request_params(self):
        source = HttpImageSource(BASE_URL, session=mock_session())
        assert source.request_params("A") == {
            "rt": "A",
            "rs": 256,
            "fg": "000000",
            "bg": "FFFFFF",
            "w": 512,
        }

    def test_fetch(self):
        session = mock_session(content=png_bytes(8, 6))
        source = HttpImageSource(BASE_URL, SourceConfig(timeout=5.0), session=session)

        pixels = source.fetch("A")

        assert pixels.shape == (6, 8, 4)
        session.get.assert_called_once_with(
            BASE_URL,
            params=source.request_params("A"),
            timeout=5.0,
        )

    def test_http_error_status(self):
        source = HttpImageSource(BASE_URL, session=mock_session(status_code=404))
        with pytest.raises(AcquisitionError, match="HTTP 404") as exc_info:
            source.fetch("A")
        assert exc_info.value.char == "A"

    def test_transport_error(self):
        session = mock_session()
        session.get.side_effect = requests.ConnectionError("refused")
        source = HttpImageSource(BASE_URL, session=session)
        with pytest.raises(AcquisitionError, match="refused"):
            source.fetch("B")

    def test_undecodable_body(self):
        source = HttpImageSource(BASE_URL, session=mock_session(content=b"<html>"))
        with pytest.raises(AcquisitionError, match="undecodable"):
            source.fetch("C")

    def test_context_manager_closes_session(self):
        session = mock_session()
        with HttpImageSource(BASE_URL, session=session):
            pass
        session.close.assert_called_once()


class TestDirectoryImageSource:
    """Tests for DirectoryImageSource."""

    def test_fetch(self, tmp_path: Path):
        (tmp_path / "U+0041.png").write_bytes(png_bytes(7, 9))
        source = DirectoryImageSource(tmp_path)
        assert source.fetch("A").shape == (9, 7, 4)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(AcquisitionError, match="no render"):
            DirectoryImageSource(tmp_path).fetch("A")

    def test_corrupt_file(self, tmp_path: Path):
        (tmp_path / "U+0041.png").write_bytes(b"junk")
        with pytest.raises(AcquisitionError, match="undecodable"):
            DirectoryImageSource(tmp_path).fetch("A")
