"""Converters between outlines, pen protocol calls and path strings.

Saved projects store each outline as an SVG path description
("M0 0H3V1H0Z"). Path strings are read with fontTools' SVG path parser
into a RecordingPen and written with SVGPathPen. Outlines can also be drawn
into any other fontTools pen.

A recording has the form produced by RecordingPen:
- ('moveTo', ((x, y),))
- ('lineTo', ((x, y),))
- ('qCurveTo', ((x1, y1), (x2, y2)))  # Quadratic
- ('curveTo', ((x1, y1), (x2, y2), (x3, y3)))  # Cubic
- ('closePath', ())
"""

from collections.abc import Iterator
from typing import Any

from fontTools.pens.recordingPen import RecordingPen
from fontTools.pens.svgPathPen import SVGPathPen
from fontTools.svgLib.path import parse_path

from fontscraper.domain import Contour, GlyphOutline, Point, PointType

Recording = list[tuple[str, tuple[Any, ...]]]


def recording_to_outline(recording: Recording) -> GlyphOutline:
    """Convert pen commands to a GlyphOutline.

    A closing on-curve point that repeats the contour start is dropped, since
    contours are implicitly closed.

    Args:
        recording: List of drawing commands

    Returns:
        GlyphOutline
    """
    contours: list[Contour] = []
    current_points: list[Point] = []

    def flush(closing: bool) -> None:
        if not current_points:
            return
        points = list(current_points)
        if (
            closing
            and len(points) > 1
            and points[-1].point_type == PointType.ON_CURVE
            and points[-1].to_tuple() == points[0].to_tuple()
        ):
            points.pop()
        contours.append(Contour(points=tuple(points)))
        current_points.clear()

    for command, args in recording:
        if command == "moveTo":
            flush(closing=False)
            x, y = args[0]
            current_points.append(Point(x, y, PointType.ON_CURVE))

        elif command == "lineTo":
            x, y = args[0]
            current_points.append(Point(x, y, PointType.ON_CURVE))

        elif command == "qCurveTo":
            for i, (x, y) in enumerate(args):
                if i < len(args) - 1:
                    current_points.append(Point(x, y, PointType.OFF_CURVE_QUAD))
                else:
                    current_points.append(Point(x, y, PointType.ON_CURVE))

        elif command == "curveTo":
            x1, y1 = args[0]
            x2, y2 = args[1]
            x3, y3 = args[2]
            current_points.append(Point(x1, y1, PointType.OFF_CURVE_CUBIC))
            current_points.append(Point(x2, y2, PointType.OFF_CURVE_CUBIC))
            current_points.append(Point(x3, y3, PointType.ON_CURVE))

        elif command == "closePath" or command == "endPath":
            flush(closing=True)

    flush(closing=False)

    return GlyphOutline(contours=tuple(contours))


def _segments(contour: Contour) -> Iterator[tuple[str, list[Point]]]:
    """Split a contour into drawing segments after its first point.

    Off-curve points are grouped with the on-curve point that ends them.
    Trailing off-curve points end at the first point. The implicit closing
    line is not yielded.
    """
    pending: list[Point] = []
    for point in contour.points[1:]:
        if point.point_type == PointType.ON_CURVE:
            yield _segment_kind(pending), [*pending, point]
            pending = []
        else:
            pending.append(point)
    if pending:
        yield _segment_kind(pending), [*pending, contour.points[0]]


def _segment_kind(off_curve: list[Point]) -> str:
    if not off_curve:
        return "line"
    if off_curve[0].point_type == PointType.OFF_CURVE_CUBIC:
        return "curve"
    return "qcurve"


def draw_outline(outline: GlyphOutline, pen: Any) -> None:
    """Draw an outline into a fontTools pen.

    Args:
        outline: Outline to draw
        pen: Any object implementing the segment pen protocol
    """
    for contour in outline:
        if not contour.points:
            continue

        pen.moveTo(contour.points[0].to_tuple())
        for kind, points in _segments(contour):
            coords = [p.to_tuple() for p in points]
            if kind == "line":
                pen.lineTo(coords[0])
            elif kind == "qcurve":
                pen.qCurveTo(*coords)
            else:
                for k in range(0, len(coords) - 2, 3):
                    pen.curveTo(*coords[k : k + 3])
        pen.closePath()


def _format_number(value: float, decimals: int) -> str:
    text = f"{round(value, decimals):.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def outline_to_path_data(outline: GlyphOutline, decimals: int = 2) -> str:
    """Serialize an outline to a compact SVG path string.

    Consecutive quadratic control points are split at their implied
    on-curve midpoints so every Q command carries one control point.

    Args:
        outline: Outline to serialize
        decimals: Maximum number of decimal places

    Returns:
        Path string, empty for an empty outline
    """
    pen = SVGPathPen(None, ntos=lambda value: _format_number(value, decimals))
    draw_outline(outline, pen)
    return pen.getCommands()


def path_data_to_outline(text: str) -> GlyphOutline:
    """Parse an SVG path string into a GlyphOutline.

    Arcs are approximated with cubic curves.

    Raises:
        ValueError: If the path string is malformed
    """
    pen = RecordingPen()
    try:
        parse_path(text, pen)
    except (IndexError, ValueError) as e:
        raise ValueError(f"Invalid path data {text[:20]!r}: {e}") from e
    return recording_to_outline(pen.value)
