"""Core geometric types for outline representation.

This module defines the fundamental geometric types used throughout fontscraper:
- Point: A 2D point with curve type information
- Contour: A closed contour representing a shape boundary
- PointType: Enum for point type on a curve

Traced outlines only ever contain on-curve points. Off-curve points appear
when an outline is restored from a saved project whose path data was edited
elsewhere.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto


class PointType(Enum):
    """Point type on a contour.

    Points can be:
    - ON_CURVE: Point on the actual curve
    - OFF_CURVE_QUAD: Quadratic Bezier control point
    - OFF_CURVE_CUBIC: Cubic Bezier control point
    """

    ON_CURVE = auto()
    OFF_CURVE_QUAD = auto()
    OFF_CURVE_CUBIC = auto()


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D space with curve metadata.

    Attributes:
        x: X coordinate in font units
        y: Y coordinate in font units
        point_type: Type of point (on-curve or control point)
    """

    x: float
    y: float
    point_type: PointType = PointType.ON_CURVE

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)

    def scaled(self, factor: float) -> "Point":
        """Scale about the origin (0, 0)."""
        return Point(self.x * factor, self.y * factor, self.point_type)

    def translated(self, dx: float, dy: float) -> "Point":
        """Shift by (dx, dy)."""
        return Point(self.x + dx, self.y + dy, self.point_type)


@dataclass(frozen=True)
class Contour:
    """A closed contour representing a shape boundary.

    Attributes:
        points: Points forming the contour, the last one implicitly joined to the first
    """

    points: tuple[Point, ...]

    @classmethod
    def rectangle(cls, x0: float, y0: float, x1: float, y1: float) -> "Contour":
        """Build an axis-aligned rectangle.

        Corners are emitted bottom-left, bottom-right, top-right, top-left,
        with y increasing upward.

        Args:
            x0: Left edge
            y0: Bottom edge
            x1: Right edge
            y1: Top edge

        Returns:
            Four-point closed contour
        """
        return cls(
            points=(
                Point(x0, y0),
                Point(x1, y0),
                Point(x1, y1),
                Point(x0, y1),
            )
        )

    def signed_area(self) -> float:
        """Calculate signed area using shoelace formula.

        Positive area means counter-clockwise winding.
        Control points are treated as polygon vertices.

        Returns:
            Signed area of the contour
        """
        n = len(self.points)
        if n < 3:
            return 0.0

        area = 0.0
        for i in range(n):
            j = (i + 1) % n
            area += self.points[i].x * self.points[j].y
            area -= self.points[j].x * self.points[i].y

        return area / 2.0

    def bounding_box(self) -> tuple[float, float, float, float]:
        """Calculate bounding box of the contour.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y)
        """
        if not self.points:
            return (0.0, 0.0, 0.0, 0.0)

        xs = [p.x for p in self.points]
        ys = [p.y for p in self.points]
        return (min(xs), min(ys), max(xs), max(ys))

    def is_axis_aligned_rectangle(self) -> bool:
        """Check if contour is exactly four on-curve corners of a rectangle."""
        if len(self.points) != 4:
            return False
        if any(p.point_type != PointType.ON_CURVE for p in self.points):
            return False
        min_x, min_y, max_x, max_y = self.bounding_box()
        corners = {(min_x, min_y), (max_x, min_y), (max_x, max_y), (min_x, max_y)}
        return {p.to_tuple() for p in self.points} == corners

    def map_points(self, func: Callable[[Point], Point]) -> "Contour":
        """Return a new contour with func applied to every point."""
        return Contour(points=tuple(func(p) for p in self.points))
