"""End-to-end tests: renders in, TrueType binary out."""

from io import BytesIO
from pathlib import Path
from unittest.mock import MagicMock

import numpy as np
import pytest
import requests
from fontTools.ttLib import TTFont
from PIL import Image

from fontscraper.config import FontScraperSettings
from fontscraper.core import BatchProcessor
from fontscraper.domain import GlyphStatus
from fontscraper.exceptions import AcquisitionError, AssemblyError
from fontscraper.io import (
    DirectoryImageSource,
    FontAssembler,
    HttpImageSource,
    ProjectFile,
    load_project,
    save_project,
)
from fontscraper.io.source import char_filename

BASE_URL = "https://fonts.example.com/render/7/font/0123456789abcdef0123456789abcdef"


def encode_png(pixels: np.ndarray) -> bytes:
    buffer = BytesIO()
    Image.fromarray(pixels).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def renders(canvas) -> dict[str, np.ndarray]:
    """Black-box renders sharing bottom row 40, 'g' descending to 48."""
    return {
        "A": canvas(64, 64, boxes=((10, 10, 29, 40),)),
        "B": canvas(64, 64, boxes=((12, 20, 21, 40),)),
        "C": canvas(64, 64, boxes=((5, 15, 24, 40),)),
        "g": canvas(64, 64, boxes=((8, 25, 19, 48),)),
        " ": canvas(64, 64),
    }


def load(data: bytes) -> TTFont:
    return TTFont(BytesIO(data))


class TestEndToEnd:
    """Full pipeline from image source to font bytes."""

    def test_letter_and_space(self, renders, fake_source):
        """A square letter plus a blank space gives a three-glyph font."""
        settings = FontScraperSettings()
        result = BatchProcessor(settings, fake_source(renders)).process("A ")

        space = result.get(" ")
        assert space.status == GlyphStatus.DONE
        assert space.max_y == -1
        assert space.y_offset == 0

        font = load(FontAssembler(settings.font).assemble(result.records, "Square"))

        assert font.getGlyphOrder() == [".notdef", "space", "A"]
        cmap = font.getBestCmap()
        assert cmap == {0x20: "space", 0x41: "A"}

        glyph = font["glyf"]["A"]
        assert (glyph.xMin, glyph.yMin, glyph.xMax, glyph.yMax) == (0, 0, 20, 31)
        assert font["hmtx"]["A"] == (20, 0)
        assert font["hmtx"]["space"][0] == 85
        assert font["glyf"]["space"].numberOfContours == 0

    def test_one_failure_in_five(self, renders, fake_source):
        """A failed character is left out; the other four make it into the font."""
        renders["C"] = AcquisitionError("C", "HTTP 502")
        settings = FontScraperSettings()
        result = BatchProcessor(settings, fake_source(renders)).process("ABC g")

        assert [r.status for r in result.records].count(GlyphStatus.ERROR) == 1
        assert result.baseline == 40

        font = load(FontAssembler(settings.font).assemble(result.records, "Partial"))

        assert font.getGlyphOrder() == [".notdef", "space", "A", "B", "g"]
        assert 0x43 not in font.getBestCmap()
        assert font["glyf"]["g"].yMin == -8

    def test_nothing_fetched(self, fake_source):
        source = fake_source({"A": AcquisitionError("A", "down")})
        result = BatchProcessor(FontScraperSettings(), source).process("A")

        with pytest.raises(AssemblyError):
            FontAssembler().assemble(result.records, "Empty")

    def test_http_source(self, renders):
        """Renders come from the endpoint named by the 'rt' query parameter."""

        def get(url, params, timeout):
            response = MagicMock()
            response.status_code = 200
            response.content = encode_png(renders[params["rt"]])
            return response

        session = MagicMock(spec=requests.Session)
        session.get.side_effect = get

        with HttpImageSource(BASE_URL, session=session) as source:
            result = BatchProcessor(FontScraperSettings(), source).process("AB ")

        assert all(r.status == GlyphStatus.DONE for r in result.records)
        assert session.get.call_count == 3

    def test_directory_source(self, renders, tmp_path: Path):
        for char, pixels in renders.items():
            (tmp_path / char_filename(char)).write_bytes(encode_png(pixels))

        result = BatchProcessor(FontScraperSettings(), DirectoryImageSource(tmp_path)).process("Ag")

        assert result.get("A").visual_width == 20
        assert result.get("g").y_offset == -8

    def test_project_round_trip_gives_same_font(self, renders, fake_source, tmp_path: Path):
        """Re-exporting a saved project reproduces the font byte for byte."""
        settings = FontScraperSettings()
        result = BatchProcessor(settings, fake_source(renders)).process("ABg ")
        records = [
            r.adjust(scale=1.25, x_offset=3.0) if r.char == "B" else r for r in result.records
        ]
        assembler = FontAssembler(settings.font)
        direct = assembler.assemble(records, "Trip")

        path = tmp_path / ProjectFile.default_filename("Trip")
        save_project(ProjectFile.from_records("Trip", records), path)
        reloaded = load_project(path)

        assert assembler.assemble(reloaded.records(), reloaded.font_family_name) == direct
