"""Domain models for fontscraper.

This module contains the core domain models representing bitmaps, outlines
and glyph records. All models are designed to be:

- Immutable (frozen dataclasses, updated by replacement)
- Independent of fonttools implementation details

Key classes:
- Point: A 2D point with curve metadata
- Contour: A closed contour representing a shape boundary
- GlyphOutline: The contours of one glyph
- ProcessedCharacter: A cropped, background-stripped bitmap
- GlyphStatus: Status state machine for a glyph in a batch
- GlyphRecord: A character's outline, metrics and transform
"""

from fontscraper.domain.contour import Contour, Point, PointType
from fontscraper.domain.glyph import GlyphRecord, GlyphStatus, ProcessedCharacter
from fontscraper.domain.outline import GlyphOutline

__all__: list[str] = [
    # Enums
    "GlyphStatus",
    "PointType",
    # Core types
    "Point",
    "Contour",
    "GlyphOutline",
    "ProcessedCharacter",
    "GlyphRecord",
]
