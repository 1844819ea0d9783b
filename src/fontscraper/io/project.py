"""Project file persistence.

A project (.scrap) is a JSON document holding the family name, render URL,
charset, every glyph's transform parameters and serialized outline, and the
editor's alignment guides. Outlines are stored as SVG path strings so the
file does not depend on how they were traced.
"""

import json
from collections.abc import Sequence
from pathlib import Path

import structlog
from fontTools.misc.roundTools import otRound
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fontscraper.domain import GlyphOutline, GlyphRecord, GlyphStatus
from fontscraper.exceptions import ProjectLoadError, ProjectSaveError
from fontscraper.io.pathdata import outline_to_path_data, path_data_to_outline

logger = structlog.get_logger(__name__)

PROJECT_FILE_FORMAT_VERSION = "1.0"
APP_IDENTIFIER = "FontScraperProject"
PROJECT_SUFFIX = ".scrap"
DEFAULT_TEST_STRING = "The quick brown fox jumps over the lazy dog. 12345!@#$%^&*()"
DEFAULT_TEST_FONT_SIZE = 24


class SavedGlyph(BaseModel):
    """One glyph as stored in a project file."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    char: str
    status: GlyphStatus
    image_url: str | None = Field(default=None, alias="imageUrl")
    processed_image_url: str | None = Field(default=None, alias="processedImageUrl")
    path_data: str | None = Field(default=None, alias="opentypePathSVGData")
    width: float | None = None
    visual_width: int | None = Field(default=None, alias="visualWidth")
    visual_height: int | None = Field(default=None, alias="visualHeight")
    x_offset: float = Field(default=0.0, alias="xOffset")
    y_offset: float = Field(default=0.0, alias="yOffset")
    scale: float = Field(default=1.0, gt=0.0)
    max_y: int | None = Field(default=None, alias="maxY")
    error_message: str | None = Field(default=None, alias="errorMessage")

    @classmethod
    def from_record(cls, record: GlyphRecord, glyph_id: str) -> "SavedGlyph":
        """Snapshot a glyph record.

        Empty outlines are not written, matching files produced by the
        browser editor.
        """
        path_data = None
        if record.outline is not None and not record.outline.is_empty():
            path_data = outline_to_path_data(record.outline)

        return cls(
            id=glyph_id,
            char=record.char,
            status=record.status,
            path_data=path_data,
            width=record.advance_width,
            visual_width=record.visual_width,
            visual_height=record.visual_height,
            x_offset=record.x_offset,
            y_offset=record.y_offset,
            scale=record.scale,
            max_y=record.max_y,
            error_message=record.error_message,
        )

    def to_record(self) -> GlyphRecord:
        """Restore a glyph record.

        A finished glyph without path data gets an empty outline. Path data
        that cannot be parsed turns the glyph into an error record.
        """
        outline: GlyphOutline | None = None
        status = self.status
        error_message = self.error_message

        if self.path_data:
            try:
                outline = path_data_to_outline(self.path_data)
            except ValueError as e:
                logger.warning("Could not restore outline", char=self.char, error=str(e))
                status = GlyphStatus.ERROR
                error_message = f"Failed to load path: {e}"
        elif status == GlyphStatus.DONE:
            outline = GlyphOutline()

        return GlyphRecord(
            char=self.char,
            status=status,
            outline=outline,
            visual_width=self.visual_width,
            visual_height=self.visual_height,
            advance_width=None if self.width is None else otRound(self.width),
            x_offset=self.x_offset,
            y_offset=self.y_offset,
            scale=self.scale,
            max_y=self.max_y,
            error_message=error_message,
        )


class ProjectFile(BaseModel):
    """A saved font scraping project."""

    model_config = ConfigDict(populate_by_name=True)

    file_format_version: str = Field(default=PROJECT_FILE_FORMAT_VERSION, alias="fileFormatVersion")
    app_identifier: str = Field(default=APP_IDENTIFIER, alias="appIdentifier")
    font_family_name: str = Field(alias="fontFamilyName")
    font_api_url_input: str = Field(default="", alias="fontApiUrlInput")
    charset: str = ""
    glyphs: list[SavedGlyph] = Field(default_factory=list)
    global_ruler_x: float = Field(default=0.0, alias="globalRulerX")
    global_ruler_y: float = Field(default=0.0, alias="globalRulerY")
    test_string: str = Field(default=DEFAULT_TEST_STRING, alias="testString")
    test_font_size: int = Field(default=DEFAULT_TEST_FONT_SIZE, alias="testFontSize")
    units_per_em: int = Field(default=256, alias="unitsPerEm")

    @classmethod
    def from_records(
        cls,
        family_name: str,
        records: Sequence[GlyphRecord],
        source_url: str = "",
        charset: str = "",
        units_per_em: int = 256,
    ) -> "ProjectFile":
        """Create a project snapshot from the records of a batch."""
        return cls(
            font_family_name=family_name,
            font_api_url_input=source_url,
            charset=charset or "".join(r.char for r in records),
            glyphs=[
                SavedGlyph.from_record(record, glyph_id=f"glyph-{index}")
                for index, record in enumerate(records)
            ],
            units_per_em=units_per_em,
        )

    def records(self) -> list[GlyphRecord]:
        """Restore all glyph records in saved order."""
        return [glyph.to_record() for glyph in self.glyphs]

    @staticmethod
    def default_filename(family_name: str) -> str:
        """File name suggested for a project, e.g. 'My_Font.scrap'."""
        stem = "_".join(family_name.split()) or "FontScraper_Project"
        return f"{stem}{PROJECT_SUFFIX}"


def save_project(project: ProjectFile, path: Path) -> None:
    """Write a project file.

    Raises:
        ProjectSaveError: If the file cannot be written
    """
    try:
        path.write_text(
            project.model_dump_json(by_alias=True, exclude_none=True, indent=2),
            encoding="utf-8",
        )
    except OSError as e:
        raise ProjectSaveError(str(path), str(e)) from e

    logger.info("Project saved", path=str(path), glyphs=len(project.glyphs))


def load_project(path: Path) -> ProjectFile:
    """Read and validate a project file.

    Raises:
        ProjectLoadError: If the file is unreadable, not JSON, not a
            FontScraper project, or fails validation
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ProjectLoadError(str(path), str(e)) from e
    except json.JSONDecodeError as e:
        raise ProjectLoadError(str(path), f"not valid JSON: {e}") from e

    if not isinstance(data, dict) or data.get("appIdentifier") != APP_IDENTIFIER:
        raise ProjectLoadError(str(path), "Not a FontScraper project.")

    try:
        project = ProjectFile.model_validate(data)
    except ValidationError as e:
        raise ProjectLoadError(str(path), str(e)) from e

    if project.file_format_version != PROJECT_FILE_FORMAT_VERSION:
        logger.warning(
            "Project file version differs",
            file_version=project.file_format_version,
            app_version=PROJECT_FILE_FORMAT_VERSION,
        )

    return project
