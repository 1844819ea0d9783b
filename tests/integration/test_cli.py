"""Tests for the command-line interface."""

from io import BytesIO
from pathlib import Path
from unittest.mock import patch

import pytest
from fontTools.ttLib import TTFont
from PIL import Image
from typer.testing import CliRunner

from fontscraper import __version__
from fontscraper.cli.app import app
from fontscraper.exceptions import AcquisitionError
from fontscraper.io import load_project

runner = CliRunner()


def flat(output: str) -> str:
    """Collapse console line wrapping."""
    return " ".join(output.split())


@pytest.fixture
def render_dir(tmp_path: Path, canvas) -> Path:
    """Directory of U+XXXX.png renders for 'A', 'B' and space."""
    directory = tmp_path / "renders"
    directory.mkdir()
    for name, pixels in {
        "U+0041.png": canvas(32, 32, boxes=((4, 4, 13, 20),)),
        "U+0042.png": canvas(32, 32, boxes=((6, 8, 11, 20),)),
        "U+0020.png": canvas(32, 32),
    }.items():
        buffer = BytesIO()
        Image.fromarray(pixels).save(buffer, format="PNG")
        (directory / name).write_bytes(buffer.getvalue())
    return directory


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestBuild:
    """Tests for the build command."""

    def test_build_from_directory(self, render_dir: Path, tmp_path: Path):
        output = tmp_path / "out" / "Test.ttf"
        project = tmp_path / "Test.scrap"

        result = runner.invoke(
            app,
            [
                "build",
                "--source-dir",
                str(render_dir),
                "--name",
                "Test Font",
                "--charset",
                "AB ",
                "--output",
                str(output),
                "--project",
                str(project),
                "--log-file",
                str(tmp_path / "build.log"),
                "-q",
            ],
        )

        assert result.exit_code == 0, result.output
        font = TTFont(output)
        assert font.getGlyphOrder() == [".notdef", "space", "A", "B"]
        assert font["name"].getDebugName(1) == "Test Font"

        saved = load_project(project)
        assert saved.font_family_name == "Test Font"
        assert saved.charset == "AB "
        assert len(saved.glyphs) == 3

    def test_failed_characters_reported(self, render_dir: Path, tmp_path: Path):
        output = tmp_path / "Partial.ttf"
        result = runner.invoke(
            app,
            [
                "build",
                "--source-dir",
                str(render_dir),
                "--name",
                "Partial",
                "--charset",
                "AZ",
                "--output",
                str(output),
                "--log-file",
                str(tmp_path / "build.log"),
                "-q",
            ],
        )

        assert result.exit_code == 0, result.output
        assert TTFont(output).getGlyphOrder() == [".notdef", "space", "A"]

    def test_previews(self, render_dir: Path, tmp_path: Path):
        previews = tmp_path / "previews"
        result = runner.invoke(
            app,
            [
                "build",
                "--source-dir",
                str(render_dir),
                "--charset",
                "A",
                "--output",
                str(tmp_path / "p.ttf"),
                "--previews",
                str(previews),
                "--log-file",
                str(tmp_path / "build.log"),
                "-q",
            ],
        )

        assert result.exit_code == 0, result.output
        with Image.open(previews / "U+0041.png") as image:
            assert image.size == (10, 17)
            assert image.mode == "RGBA"

    def test_nothing_processed(self, tmp_path: Path):
        empty = tmp_path / "empty"
        empty.mkdir()
        output = tmp_path / "none.ttf"
        result = runner.invoke(
            app,
            [
                "build",
                "--source-dir",
                str(empty),
                "--charset",
                "A",
                "--output",
                str(output),
                "--log-file",
                str(tmp_path / "build.log"),
                "-q",
            ],
        )

        assert result.exit_code == 1
        assert "No characters" in flat(result.output)
        assert not output.exists()

    def test_requires_one_source(self, render_dir: Path):
        result = runner.invoke(app, ["build", "--name", "X"])
        assert result.exit_code == 1

        result = runner.invoke(
            app,
            [
                "build",
                "https://x.example/render/1/font/0123456789abcdef0123456789abcdef",
                "--source-dir",
                str(render_dir),
            ],
        )
        assert result.exit_code == 1

    def test_invalid_url(self):
        result = runner.invoke(app, ["build", "https://example.com/fonts/abc", "-q"])
        assert result.exit_code == 1
        assert "Invalid font URL" in flat(result.output)

    def test_verbose_and_quiet_conflict(self, render_dir: Path):
        result = runner.invoke(app, ["build", "--source-dir", str(render_dir), "-v", "-q"])
        assert result.exit_code == 1

    def test_glyph_count_excludes_blank_renders(self, tmp_path: Path, canvas):
        """A blank non-space render is left out of the reported glyph count."""
        renders = tmp_path / "blank"
        renders.mkdir()
        for name, pixels in {
            "U+0041.png": canvas(32, 32, boxes=((4, 4, 13, 20),)),
            "U+0042.png": canvas(32, 32),
        }.items():
            Image.fromarray(pixels).save(renders / name, format="PNG")
        output = tmp_path / "Blank.ttf"

        result = runner.invoke(
            app,
            [
                "build",
                "--source-dir",
                str(renders),
                "--charset",
                "AB",
                "--output",
                str(output),
                "--log-file",
                str(tmp_path / "build.log"),
            ],
        )

        assert result.exit_code == 0, result.output
        assert TTFont(output).getGlyphOrder() == [".notdef", "space", "A"]
        assert "3 glyphs" in flat(result.output)
        assert "4 glyphs" not in flat(result.output)

    def test_http_source_closed(self, tmp_path: Path):
        with patch("fontscraper.cli.app.HttpImageSource") as source_cls:
            source_cls.return_value.fetch.side_effect = AcquisitionError("A", "down")
            result = runner.invoke(
                app,
                [
                    "build",
                    "https://x.example/render/1/font/0123456789abcdef0123456789abcdef",
                    "--charset",
                    "A",
                    "--output",
                    str(tmp_path / "none.ttf"),
                    "--log-file",
                    str(tmp_path / "build.log"),
                    "-q",
                ],
            )

        assert result.exit_code == 1
        source_cls.return_value.close.assert_called_once()


class TestExport:
    """Tests for the export command."""

    def test_export_project(self, render_dir: Path, tmp_path: Path):
        project = tmp_path / "Saved.scrap"
        first = tmp_path / "first.ttf"
        build = runner.invoke(
            app,
            [
                "build",
                "--source-dir",
                str(render_dir),
                "--name",
                "Saved",
                "--charset",
                "AB ",
                "--output",
                str(first),
                "--project",
                str(project),
                "--log-file",
                str(tmp_path / "build.log"),
                "-q",
            ],
        )
        assert build.exit_code == 0, build.output

        second = tmp_path / "second.ttf"
        result = runner.invoke(app, ["export", str(project), "--output", str(second), "-q"])

        assert result.exit_code == 0, result.output
        assert second.read_bytes() == first.read_bytes()

    def test_missing_project(self, tmp_path: Path):
        result = runner.invoke(app, ["export", str(tmp_path / "missing.scrap")])
        assert result.exit_code == 1
        assert "not found" in flat(result.output)

    def test_invalid_project(self, tmp_path: Path):
        path = tmp_path / "bad.scrap"
        path.write_text('{"appIdentifier": "Something else"}', encoding="utf-8")
        result = runner.invoke(app, ["export", str(path), "-q"])
        assert result.exit_code == 1
        assert "Not a FontScraper project" in flat(result.output)
