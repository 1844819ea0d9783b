"""Core processing algorithms for fontscraper.

This module contains the core algorithms for:

- Foreground extraction (background removal, tight cropping)
- Baseline calibration (shared bottom row across a batch)
- Outline tracing (scanline runs to rectilinear contours)
- Glyph transforms (scale about the origin, then translate)
- Batch orchestration (two stages separated by the baseline barrier)

Key functions:
- compute_baseline: Most frequent bottom row of a batch
- trace_mask: Convert an opacity mask to rectangles
- rasterize_outline: Convert rectangles back to an opacity mask
- transform_outline: Apply scale and offsets to an outline
- transform_advance_width: Scale an advance width

Key classes:
- ForegroundExtractor: Strips the background and crops a bitmap
- OutlineTracer: Vectorizes processed characters
- GlyphTransformer: Applies a record's transform for export
- BatchProcessor: Runs the full batch pipeline
"""

from fontscraper.core.baseline import compute_baseline
from fontscraper.core.extractor import ForegroundExtractor
from fontscraper.core.pipeline import (
    DEFAULT_CHARSET,
    BatchProcessor,
    BatchResult,
    unique_chars,
)
from fontscraper.core.tracer import (
    OutlineTracer,
    TraceResult,
    compute_y_offset,
    rasterize_outline,
    trace_mask,
)
from fontscraper.core.transform import (
    GlyphTransformer,
    TransformedGlyph,
    resolve_space_advance_width,
    transform_advance_width,
    transform_outline,
)

__all__ = [
    "DEFAULT_CHARSET",
    # Pipeline
    "BatchProcessor",
    "BatchResult",
    # Stage classes
    "ForegroundExtractor",
    "GlyphTransformer",
    "OutlineTracer",
    "TraceResult",
    "TransformedGlyph",
    # Functions
    "compute_baseline",
    "compute_y_offset",
    "rasterize_outline",
    "resolve_space_advance_width",
    "trace_mask",
    "transform_advance_width",
    "transform_outline",
    "unique_chars",
]
