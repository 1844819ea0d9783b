"""Scanline vectorization of bitmaps into rectilinear outlines.

Every horizontal run of opaque pixels becomes one closed rectangle. The
conversion is exact: re-rasterizing the outline at one font unit per pixel
reproduces the source opacity mask. No curve fitting is attempted, so outline
size grows with the pixel perimeter rather than with visual complexity.

Outline coordinates are local to the cropped bitmap: origin at its bottom-left
corner, y increasing upward. A run spanning columns [x0, x1] on row r (counted
from the top) of a bitmap of height H covers x in [x0, x1 + 1] and
y in [H - 1 - r, H - r].
"""

from dataclasses import dataclass

import numpy as np

from fontscraper.config import ExtractionConfig, TracingConfig
from fontscraper.domain import Contour, GlyphOutline, ProcessedCharacter
from fontscraper.exceptions import TraceError


@dataclass(frozen=True)
class TraceResult:
    """Outline of one character plus its vertical placement.

    Attributes:
        outline: Traced outline in local glyph coordinates
        y_offset: Shift that puts the character's bottom edge on the baseline
    """

    outline: GlyphOutline
    y_offset: int


def opacity_mask(pixels: np.ndarray, alpha_threshold: int = 128) -> np.ndarray:
    """Boolean mask of pixels whose alpha exceeds the threshold."""
    return pixels[:, :, 3] > alpha_threshold


def find_runs(row: np.ndarray) -> list[tuple[int, int]]:
    """Find runs of True values in a 1D boolean array.

    Args:
        row: Boolean array

    Returns:
        List of inclusive (start, end) column pairs, left to right
    """
    padded = np.concatenate(([False], row, [False])).astype(np.int8)
    edges = np.diff(padded)
    starts = np.flatnonzero(edges == 1)
    ends = np.flatnonzero(edges == -1) - 1
    return [(int(s), int(e)) for s, e in zip(starts, ends)]


def compute_y_offset(baseline: int, max_y: int) -> int:
    """Vertical offset aligning a character's bottom row to the baseline.

    Empty characters (max_y == -1) are never shifted.
    """
    if max_y == -1:
        return 0
    return baseline - max_y


def trace_mask(mask: np.ndarray, merge_rows: bool = False) -> GlyphOutline:
    """Convert an opacity mask to a rectilinear outline.

    Args:
        mask: Boolean array of shape (height, width)
        merge_rows: Join identical runs on consecutive rows into one rectangle

    Returns:
        GlyphOutline with one rectangle per run (or per merged run stack)
    """
    height = mask.shape[0]

    # (x0, x1, top_row, bottom_row), inclusive
    spans: list[list[int]] = []
    open_spans: dict[tuple[int, int], int] = {}

    for r in range(height):
        next_open: dict[tuple[int, int], int] = {}
        for x0, x1 in find_runs(mask[r]):
            if merge_rows and (x0, x1) in open_spans:
                idx = open_spans[(x0, x1)]
                spans[idx][3] = r
            else:
                idx = len(spans)
                spans.append([x0, x1, r, r])
            next_open[(x0, x1)] = idx
        open_spans = next_open

    contours = tuple(
        Contour.rectangle(x0, height - 1 - bottom, x1 + 1, height - top)
        for x0, x1, top, bottom in spans
    )
    return GlyphOutline(contours=contours)


def rasterize_outline(outline: GlyphOutline, width: int, height: int) -> np.ndarray:
    """Rasterize a rectilinear outline back to a mask at one unit per pixel.

    Args:
        outline: Outline made of axis-aligned rectangles in local coordinates
        width: Mask width
        height: Mask height

    Returns:
        Boolean array of shape (height, width)

    Raises:
        TraceError: If a contour is not an axis-aligned rectangle
    """
    mask = np.zeros((height, width), dtype=bool)
    for contour in outline:
        if not contour.is_axis_aligned_rectangle():
            raise TraceError("outline contains a non-rectangular contour")
        x0, y0, x1, y1 = (int(round(v)) for v in contour.bounding_box())
        mask[max(0, height - y1) : max(0, height - y0), max(0, x0) : max(0, x1)] = True
    return mask


class OutlineTracer:
    """Vectorizes processed characters and places them on the baseline.

    Example:
        tracer = OutlineTracer()
        result = tracer.trace(processed, baseline=204)
        print(len(result.outline), result.y_offset)
    """

    def __init__(
        self,
        config: TracingConfig | None = None,
        extraction: ExtractionConfig | None = None,
    ) -> None:
        self.config = config or TracingConfig()
        self.alpha_threshold = (extraction or ExtractionConfig()).alpha_threshold

    def trace(self, processed: ProcessedCharacter, baseline: int) -> TraceResult:
        """Trace a processed character.

        Args:
            processed: Cropped, background-stripped bitmap
            baseline: Shared baseline row of the batch

        Returns:
            TraceResult with the outline and vertical offset

        Raises:
            TraceError: If the bitmap does not match its declared size
        """
        pixels = processed.pixels
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise TraceError(f"expected an RGBA bitmap, got shape {pixels.shape}")
        if pixels.shape[:2] != (processed.height, processed.width):
            raise TraceError(
                f"bitmap is {pixels.shape[1]}x{pixels.shape[0]}, "
                f"expected {processed.width}x{processed.height}"
            )

        mask = opacity_mask(pixels, self.alpha_threshold)
        outline = trace_mask(mask, merge_rows=self.config.merge_rows)

        return TraceResult(
            outline=outline,
            y_offset=compute_y_offset(baseline, processed.max_y),
        )
