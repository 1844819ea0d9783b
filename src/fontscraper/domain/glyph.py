"""Per-character records flowing through the batch pipeline.

This module defines:
- ProcessedCharacter: a cropped, background-stripped bitmap
- GlyphStatus: the status state machine shown to the editing UI
- GlyphRecord: one character's traced outline plus its editable transform
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, ClassVar

import numpy as np

from fontscraper.domain.outline import GlyphOutline
from fontscraper.exceptions import GlyphStateError


@dataclass(frozen=True, eq=False)
class ProcessedCharacter:
    """A cropped bitmap with the background made transparent.

    Attributes:
        pixels: RGBA array of shape (height, width, 4), dtype uint8
        width: Bitmap width in pixels (always >= 1)
        height: Bitmap height in pixels (always >= 1)
        max_y: Row of the lowest foreground pixel in the uncropped source,
            or -1 when the source had no foreground at all
    """

    pixels: np.ndarray
    width: int
    height: int
    max_y: int

    @classmethod
    def empty(cls) -> "ProcessedCharacter":
        """Placeholder for characters without foreground pixels (e.g. space)."""
        return cls(
            pixels=np.zeros((1, 1, 4), dtype=np.uint8),
            width=1,
            height=1,
            max_y=-1,
        )

    @property
    def is_empty(self) -> bool:
        """True for the whitespace placeholder."""
        return self.max_y == -1


class GlyphStatus(str, Enum):
    """Lifecycle of a glyph inside one batch.

    pending -> fetching -> processing -> converting -> done
    Any non-final state may move to error. done and error are final.
    """

    PENDING = "pending"
    FETCHING = "fetching"
    PROCESSING = "processing"
    CONVERTING = "converting"
    DONE = "done"
    ERROR = "error"

    @property
    def is_final(self) -> bool:
        return self in (GlyphStatus.DONE, GlyphStatus.ERROR)

    def can_transition_to(self, target: "GlyphStatus") -> bool:
        """Check whether moving to target is a legal step."""
        return target in _TRANSITIONS[self]


_TRANSITIONS: dict[GlyphStatus, frozenset[GlyphStatus]] = {
    GlyphStatus.PENDING: frozenset({GlyphStatus.FETCHING, GlyphStatus.ERROR}),
    GlyphStatus.FETCHING: frozenset({GlyphStatus.PROCESSING, GlyphStatus.ERROR}),
    GlyphStatus.PROCESSING: frozenset({GlyphStatus.CONVERTING, GlyphStatus.ERROR}),
    GlyphStatus.CONVERTING: frozenset({GlyphStatus.DONE, GlyphStatus.ERROR}),
    GlyphStatus.DONE: frozenset(),
    GlyphStatus.ERROR: frozenset(),
}


@dataclass(frozen=True)
class GlyphRecord:
    """One character of a batch.

    Records are immutable; every status change or edit produces a
    replacement via dataclasses.replace. The outline and visual size are
    fixed once tracing is done; only the offsets, scale and advance width
    can be edited afterwards.

    Attributes:
        char: The character this glyph represents
        status: Current lifecycle state
        outline: Traced outline in local glyph coordinates (None until done)
        visual_width: Width of the cropped bitmap in pixels
        visual_height: Height of the cropped bitmap in pixels
        advance_width: Unscaled advance width in font units
        x_offset: Horizontal translation in font units, positive moves right
        y_offset: Vertical translation relative to the baseline, positive moves up
        scale: Multiplier for outline geometry and advance width
        max_y: Bottom row of the character in the uncropped source, -1 when empty
        error_message: Human-readable failure description for error records
    """

    EDITABLE_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {"x_offset", "y_offset", "scale", "advance_width"}
    )

    char: str
    status: GlyphStatus = GlyphStatus.PENDING
    outline: GlyphOutline | None = None
    visual_width: int | None = None
    visual_height: int | None = None
    advance_width: int | None = None
    x_offset: float = 0.0
    y_offset: float = 0.0
    scale: float = 1.0
    max_y: int | None = None
    error_message: str | None = None

    @property
    def codepoint(self) -> int | None:
        """Unicode code point, or None when char is not exactly one code point."""
        if len(self.char) != 1:
            return None
        return ord(self.char)

    @property
    def is_exportable(self) -> bool:
        """True when the glyph can be handed to the font assembler."""
        return self.status == GlyphStatus.DONE and self.outline is not None

    def transition(self, target: GlyphStatus, **changes: Any) -> "GlyphRecord":
        """Move to a new status, returning the replacement record.

        Args:
            target: Next status
            **changes: Other fields to set on the replacement

        Returns:
            New GlyphRecord

        Raises:
            GlyphStateError: If the transition is not allowed
        """
        if not self.status.can_transition_to(target):
            raise GlyphStateError(self.char, self.status.value, target.value)
        return replace(self, status=target, **changes)

    def fail(self, message: str) -> "GlyphRecord":
        """Mark the record as failed with a message."""
        return self.transition(GlyphStatus.ERROR, error_message=message)

    def adjust(self, **changes: Any) -> "GlyphRecord":
        """Apply user edits to a finished glyph.

        Only x_offset, y_offset, scale and advance_width may be changed.

        Raises:
            GlyphStateError: If the glyph is not done
            ValueError: For unknown fields, non-positive scale or negative advance width
        """
        if self.status != GlyphStatus.DONE:
            raise GlyphStateError(self.char, self.status.value, "edited")

        unknown = set(changes) - self.EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        scale = changes.get("scale", self.scale)
        if scale <= 0:
            raise ValueError(f"Scale must be positive, got {scale}")

        advance_width = changes.get("advance_width", self.advance_width)
        if advance_width is not None and advance_width < 0:
            raise ValueError(f"Advance width must be non-negative, got {advance_width}")

        return replace(self, **changes)
