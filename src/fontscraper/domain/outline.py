"""Glyph outline made of closed contours."""

from collections.abc import Iterator
from dataclasses import dataclass, field

from fontscraper.domain.contour import Contour


@dataclass(frozen=True)
class GlyphOutline:
    """Ordered sequence of closed contours forming one glyph shape.

    Traced outlines use the glyph's own cropped bounding box as coordinate
    space: origin at its bottom-left corner, y increasing upward.

    Attributes:
        contours: Contours in tracing order
    """

    contours: tuple[Contour, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[Contour]:
        return iter(self.contours)

    def __len__(self) -> int:
        return len(self.contours)

    def is_empty(self) -> bool:
        """Check if the outline has no drawable contours."""
        return not any(contour.points for contour in self.contours)

    def bounding_box(self) -> tuple[float, float, float, float] | None:
        """Combined bounding box, or None for an empty outline.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y) or None
        """
        boxes = [c.bounding_box() for c in self.contours if c.points]
        if not boxes:
            return None
        return (
            min(b[0] for b in boxes),
            min(b[1] for b in boxes),
            max(b[2] for b in boxes),
            max(b[3] for b in boxes),
        )

    def point_count(self) -> int:
        """Total number of points across all contours."""
        return sum(len(c.points) for c in self.contours)
