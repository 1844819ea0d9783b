"""TrueType assembly of traced glyphs.

This module builds a complete sfnt binary (glyf, loca, cmap, hmtx, hhea,
head, maxp, OS/2, name, post) from finished glyph records using fontTools'
FontBuilder. Assembly is a pure in-memory transform: the same records always
produce the same bytes.
"""

import os
import tempfile
from collections.abc import Sequence
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

import structlog
from fontTools.agl import UV2AGL
from fontTools.fontBuilder import FontBuilder
from fontTools.misc.roundTools import otRound
from fontTools.misc.timeTools import timestampSinceEpoch
from fontTools.pens.cu2quPen import Cu2QuPen
from fontTools.pens.roundingPen import RoundingPen
from fontTools.pens.ttGlyphPen import TTGlyphPen
from fontTools.ttLib import TTFont
from fontTools.ttLib.tables._g_l_y_f import Glyph

from fontscraper.config import FontConfig
from fontscraper.core.transform import (
    SPACE,
    GlyphTransformer,
    resolve_space_advance_width,
)
from fontscraper.domain import Contour, GlyphOutline, GlyphRecord
from fontscraper.exceptions import AssemblyError
from fontscraper.io.pathdata import draw_outline

logger = structlog.get_logger(__name__)

NOTDEF = ".notdef"
SPACE_GLYPH = "space"

# head.created / head.modified, fixed so output is reproducible
FIXED_TIMESTAMP = timestampSinceEpoch(0)

# Maximum error in font units when converting cubic curves to quadratics
CU2QU_MAX_ERR = 1.0

_PS_FORBIDDEN = set("[](){}<>/% ")


@dataclass(frozen=True)
class FontMetrics:
    """Font-wide vertical metrics.

    Attributes:
        units_per_em: Font units per em
        ascent: Distance from baseline to the top of the em box
        descent: Distance from baseline to the bottom of the em box (negative)
    """

    units_per_em: int
    ascent: int
    descent: int

    @classmethod
    def for_units_per_em(cls, units_per_em: int) -> "FontMetrics":
        return cls(
            units_per_em=units_per_em,
            ascent=otRound(units_per_em * 0.85),
            descent=-otRound(units_per_em * 0.15),
        )


def glyph_name_for(codepoint: int) -> str:
    """Production glyph name for a code point ('A', 'space', 'uni00C0', ...)."""
    name = UV2AGL.get(codepoint)
    if name:
        return name
    if codepoint <= 0xFFFF:
        return f"uni{codepoint:04X}"
    return f"u{codepoint:05X}"


def postscript_name(family_name: str, style_name: str) -> str:
    """Build a PostScript name; spaces and reserved characters are dropped."""

    def clean(text: str) -> str:
        return "".join(c for c in text if 33 <= ord(c) <= 126 and c not in _PS_FORBIDDEN)

    family = clean(family_name) or "Untitled"
    style = clean(style_name) or "Regular"
    return f"{family}-{style}"[:63]


def notdef_outline(metrics: FontMetrics) -> GlyphOutline:
    """Rectangular placeholder drawn for unmapped characters."""
    advance = otRound(metrics.units_per_em / 2)
    box_width = advance / 2
    box_height = otRound(metrics.ascent * 0.7)
    return GlyphOutline(contours=(Contour.rectangle(0, 0, box_width, box_height),))


def _compile_glyph(outline: GlyphOutline) -> Glyph:
    """Draw an outline into a TrueType glyph with integer coordinates."""
    tt_pen = TTGlyphPen(None)
    pen = Cu2QuPen(RoundingPen(tt_pen, roundFunc=otRound), max_err=CU2QU_MAX_ERR)
    draw_outline(outline, pen)
    return tt_pen.glyph()


def _left_side_bearing(glyph: Glyph) -> int:
    """Smallest x coordinate of a compiled glyph, 0 for empty glyphs."""
    if glyph.numberOfContours <= 0:
        return 0
    return int(min(x for x, _ in glyph.coordinates))


class FontAssembler:
    """Assembles finished glyph records into a TrueType font.

    Glyph order is always .notdef, space, then the remaining records in the
    order given. Records that cannot be encoded or have no outline after
    transformation are skipped with a warning.

    Example:
        assembler = FontAssembler(FontConfig(units_per_em=256))
        data = assembler.assemble(records, family_name="My Font")
        Path("MyFont.ttf").write_bytes(data)
    """

    def __init__(self, config: FontConfig | None = None) -> None:
        self.config = config or FontConfig()
        self.metrics = FontMetrics.for_units_per_em(self.config.units_per_em)
        self.transformer = GlyphTransformer(self.config.units_per_em)

    def build(self, records: Sequence[GlyphRecord], family_name: str) -> TTFont:
        """Build an in-memory TTFont.

        Args:
            records: Glyph records; only finished ones are used
            family_name: Font family name

        Returns:
            fontTools TTFont

        Raises:
            AssemblyError: If no record is usable or fontTools rejects the tables
        """
        usable = [r for r in records if r.is_exportable]
        if not usable:
            raise AssemblyError("No successfully processed characters available to generate a font.")

        upm = self.metrics.units_per_em
        glyph_order = [NOTDEF, SPACE_GLYPH]
        glyphs = {
            NOTDEF: _compile_glyph(notdef_outline(self.metrics)),
            SPACE_GLYPH: _compile_glyph(GlyphOutline()),
        }
        advances = {
            NOTDEF: otRound(upm / 2),
            SPACE_GLYPH: resolve_space_advance_width(usable, upm),
        }
        cmap = {ord(SPACE): SPACE_GLYPH}
        skipped = 0

        for record in usable:
            if record.char == SPACE:
                continue

            codepoint = record.codepoint
            if codepoint is None:
                logger.warning("Skipping glyph without a single code point", char=record.char)
                skipped += 1
                continue

            name = glyph_name_for(codepoint)
            if name in glyphs or codepoint in cmap:
                logger.warning("Skipping duplicate glyph", char=record.char, glyph=name)
                skipped += 1
                continue

            transformed = self.transformer.apply(record)
            if transformed.outline.is_empty():
                logger.warning("Skipping glyph with empty outline", char=record.char, glyph=name)
                skipped += 1
                continue

            glyph_order.append(name)
            glyphs[name] = _compile_glyph(transformed.outline)
            advances[name] = transformed.advance_width
            cmap[codepoint] = name

        logger.info(
            "Assembling font",
            family=family_name,
            glyphs=len(glyph_order),
            skipped=skipped,
        )

        try:
            return self._build_font(family_name, glyph_order, glyphs, advances, cmap)
        except Exception as e:
            raise AssemblyError(str(e)) from e

    def _build_font(
        self,
        family_name: str,
        glyph_order: list[str],
        glyphs: dict[str, Glyph],
        advances: dict[str, int],
        cmap: dict[int, str],
    ) -> TTFont:
        metrics = self.metrics
        style = self.config.style_name

        fb = FontBuilder(metrics.units_per_em, isTTF=True)
        head = fb.font["head"]
        head.created = FIXED_TIMESTAMP
        head.modified = FIXED_TIMESTAMP
        fb.setupGlyphOrder(glyph_order)
        fb.setupCharacterMap(dict(sorted(cmap.items())))
        fb.setupGlyf(glyphs)

        fb.setupHorizontalMetrics(
            {name: (advances[name], _left_side_bearing(glyphs[name])) for name in glyph_order}
        )
        fb.setupHorizontalHeader(ascent=metrics.ascent, descent=metrics.descent)
        fb.setupOS2(
            sTypoAscender=metrics.ascent,
            sTypoDescender=metrics.descent,
            sTypoLineGap=0,
            usWinAscent=metrics.ascent,
            usWinDescent=-metrics.descent,
        )
        fb.setupNameTable(
            {
                "familyName": family_name,
                "styleName": style,
                "uniqueFontIdentifier": f"{family_name}-{style}",
                "fullName": f"{family_name} {style}",
                "psName": postscript_name(family_name, style),
                "version": self.config.version,
            }
        )
        fb.setupPost()
        return fb.font

    def assemble(self, records: Sequence[GlyphRecord], family_name: str) -> bytes:
        """Build the font and serialize it to TrueType bytes.

        Raises:
            AssemblyError: If the font cannot be built or compiled
        """
        font = self.build(records, family_name)
        buffer = BytesIO()
        try:
            font.save(buffer)
        except Exception as e:
            raise AssemblyError(f"could not compile font tables: {e}") from e
        finally:
            font.close()
        return buffer.getvalue()


def write_font(data: bytes, output_path: Path) -> None:
    """Write font bytes, replacing any existing file only once fully written."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=output_path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_name, output_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
