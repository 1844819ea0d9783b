"""Tests for per-glyph export transforms."""

import pytest

from fontscraper.core.transform import (
    GlyphTransformer,
    default_space_width,
    resolve_space_advance_width,
    transform_advance_width,
    transform_outline,
)
from fontscraper.domain import Contour, GlyphOutline, GlyphRecord, GlyphStatus


@pytest.fixture
def bar() -> GlyphOutline:
    """A 3x1 rectangle at the origin."""
    return GlyphOutline(contours=(Contour.rectangle(0, 0, 3, 1),))


def done_record(char: str, outline: GlyphOutline | None, **fields) -> GlyphRecord:
    return GlyphRecord(char=char, status=GlyphStatus.DONE, outline=outline, **fields)


class TestTransformOutline:
    """Tests for transform_outline."""

    def test_identity_returns_same_outline(self, bar):
        assert transform_outline(bar, 1.0, 0.0, 0.0) is bar

    def test_scale_then_translate(self, bar):
        """Test a point (x, y) maps to (x*s + dx, y*s + dy)."""
        result = transform_outline(bar, 2.0, 5.0, 3.0)
        assert [p.to_tuple() for p in result.contours[0].points] == [
            (5, 3),
            (11, 3),
            (11, 5),
            (5, 5),
        ]

    def test_offsets_are_not_scaled(self, bar):
        """Test translating before scaling would give a different result."""
        result = transform_outline(bar, 2.0, 5.0, 0.0)
        wrong_order = [((x + 5.0) * 2.0, y * 2.0) for x, y in [(0, 0), (3, 0), (3, 1), (0, 1)]]
        assert [p.to_tuple() for p in result.contours[0].points] != wrong_order
        assert result.bounding_box() == (5, 0, 11, 2)

    def test_scale_about_origin(self):
        """Test scaling is about (0, 0), not the outline center."""
        outline = GlyphOutline(contours=(Contour.rectangle(2, 2, 4, 4),))
        assert transform_outline(outline, 0.5, 0, 0).bounding_box() == (1, 1, 2, 2)

    def test_input_unchanged(self, bar):
        transform_outline(bar, 3.0, 1.0, 1.0)
        assert bar.bounding_box() == (0, 0, 3, 1)


class TestAdvanceWidth:
    """Tests for advance width helpers."""

    def test_scaled(self):
        assert transform_advance_width(10, 1.5) == 15
        assert transform_advance_width(3, 0.5) == 2  # 1.5 rounds half up

    def test_never_below_one(self):
        assert transform_advance_width(1, 0.01) == 1
        assert transform_advance_width(0, 2.0) == 1

    def test_default_space_width(self):
        assert default_space_width(256) == 85
        assert default_space_width(1000) == 333


class TestResolveSpaceAdvanceWidth:
    """Tests for the space glyph advance width."""

    def test_default_without_space_record(self, bar):
        records = [done_record("A", bar, advance_width=3)]
        assert resolve_space_advance_width(records, 256) == 85

    def test_finished_space_record_wins(self):
        records = [done_record(" ", GlyphOutline(), advance_width=60, scale=0.5)]
        assert resolve_space_advance_width(records, 256) == 30

    def test_failed_space_record_ignored(self):
        records = [GlyphRecord(char=" ", status=GlyphStatus.ERROR, advance_width=60)]
        assert resolve_space_advance_width(records, 300) == 100


class TestGlyphTransformer:
    """Tests for GlyphTransformer."""

    def test_apply(self, bar):
        record = done_record("A", bar, advance_width=3, scale=2.0, x_offset=1.0, y_offset=-4.0)
        glyph = GlyphTransformer(256).apply(record)
        assert glyph.char == "A"
        assert glyph.advance_width == 6
        assert glyph.outline.bounding_box() == (1, -4, 7, -2)

    def test_missing_advance_falls_back_to_half_em(self, bar):
        glyph = GlyphTransformer(256).apply(done_record("A", bar, scale=2.0))
        assert glyph.advance_width == 256

    def test_missing_outline(self):
        glyph = GlyphTransformer(256).apply(done_record("A", None, advance_width=5))
        assert glyph.outline.is_empty()
