"""Per-glyph geometric transforms applied at export time.

Scaling always happens about the outline's local origin (0, 0) and strictly
before translation, so offsets are expressed in final font units and are
never scaled themselves.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from fontTools.misc.roundTools import otRound

from fontscraper.domain import GlyphOutline, GlyphRecord, GlyphStatus, Point

SPACE = " "


@dataclass(frozen=True)
class TransformedGlyph:
    """A glyph ready for assembly.

    Attributes:
        char: Source character
        outline: Outline in final font units
        advance_width: Final advance width in font units
    """

    char: str
    outline: GlyphOutline
    advance_width: int


def transform_outline(
    outline: GlyphOutline,
    scale: float,
    x_offset: float,
    y_offset: float,
) -> GlyphOutline:
    """Scale an outline about (0, 0), then translate it.

    Args:
        outline: Outline in local glyph coordinates
        scale: Uniform scale factor
        x_offset: Horizontal translation in font units
        y_offset: Vertical translation in font units

    Returns:
        New transformed outline
    """
    if scale == 1 and x_offset == 0 and y_offset == 0:
        return outline

    def apply(point: Point) -> Point:
        return point.scaled(scale).translated(x_offset, y_offset)

    return GlyphOutline(contours=tuple(c.map_points(apply) for c in outline.contours))


def transform_advance_width(base_advance_width: float, scale: float) -> int:
    """Scale an advance width, never going below one unit."""
    return max(1, otRound(base_advance_width * scale))


def default_space_width(units_per_em: int) -> int:
    """Advance width used for the space glyph when none was fetched."""
    return units_per_em // 3


def resolve_space_advance_width(records: Iterable[GlyphRecord], units_per_em: int) -> int:
    """Advance width of the space glyph.

    A finished space record with its own advance width wins over the default
    of one third of an em.
    """
    for record in records:
        if record.char == SPACE and record.status == GlyphStatus.DONE and record.advance_width is not None:
            return transform_advance_width(record.advance_width, record.scale)
    return default_space_width(units_per_em)


class GlyphTransformer:
    """Applies a record's scale and offsets to its outline and advance width.

    Example:
        transformer = GlyphTransformer(units_per_em=256)
        glyph = transformer.apply(record)
    """

    def __init__(self, units_per_em: int) -> None:
        self.units_per_em = units_per_em

    def apply(self, record: GlyphRecord) -> TransformedGlyph:
        """Transform one record.

        Records without an outline yield an empty outline. Records without an
        advance width fall back to half an em before scaling.
        """
        outline = record.outline if record.outline is not None else GlyphOutline()
        base_width = record.advance_width
        if base_width is None:
            base_width = otRound(self.units_per_em / 2)

        return TransformedGlyph(
            char=record.char,
            outline=transform_outline(outline, record.scale, record.x_offset, record.y_offset),
            advance_width=transform_advance_width(base_width, record.scale),
        )
