"""Background removal and tight cropping of rendered characters.

The render endpoint draws black glyphs on a white canvas. Every pixel whose
RGB channels all lie within a tolerance of the background color is made fully
transparent, regardless of its existing alpha; the remaining pixels define the
character's bounding box.
"""

import numpy as np

from fontscraper.config import ExtractionConfig
from fontscraper.domain import ProcessedCharacter
from fontscraper.exceptions import ExtractionError


def background_mask(
    pixels: np.ndarray,
    background_color: tuple[int, int, int],
    tolerance: int,
) -> np.ndarray:
    """Classify pixels as background.

    Args:
        pixels: RGBA array of shape (height, width, 4)
        background_color: RGB background color
        tolerance: Maximum per-channel distance still counted as background

    Returns:
        Boolean array of shape (height, width), True for background
    """
    rgb = pixels[:, :, :3].astype(np.int16)
    target = np.asarray(background_color, dtype=np.int16)
    return np.all(np.abs(rgb - target) <= tolerance, axis=2)


def foreground_bounds(mask: np.ndarray) -> tuple[int, int, int, int] | None:
    """Inclusive bounding box of the True cells of a mask.

    Returns:
        Tuple of (min_x, min_y, max_x, max_y), or None if the mask is all False
    """
    rows = np.flatnonzero(mask.any(axis=1))
    if rows.size == 0:
        return None
    cols = np.flatnonzero(mask.any(axis=0))
    return (int(cols[0]), int(rows[0]), int(cols[-1]), int(rows[-1]))


class ForegroundExtractor:
    """Strips the background from a bitmap and crops it to its content.

    Example:
        extractor = ForegroundExtractor()
        processed = extractor.extract(pixels)
        print(processed.width, processed.height, processed.max_y)
    """

    def __init__(self, config: ExtractionConfig | None = None) -> None:
        self.config = config or ExtractionConfig()

    def extract(self, pixels: np.ndarray) -> ProcessedCharacter:
        """Remove the background and crop to the foreground bounding box.

        The input array may be modified in place (its background alpha is
        zeroed); callers must not rely on it afterwards.

        Args:
            pixels: RGBA array of shape (height, width, 4), dtype uint8

        Returns:
            ProcessedCharacter, or the empty placeholder when nothing but
            background was found

        Raises:
            ExtractionError: If the array is not a non-empty RGBA bitmap
        """
        self._validate(pixels)

        mask = background_mask(
            pixels,
            self.config.background_color,
            self.config.tolerance,
        )
        if not pixels.flags.writeable:
            pixels = pixels.copy()
        pixels[mask, 3] = 0

        bounds = foreground_bounds(~mask)
        if bounds is None:
            return ProcessedCharacter.empty()

        min_x, min_y, max_x, max_y = bounds
        width = max(1, max_x - min_x + 1)
        height = max(1, max_y - min_y + 1)
        cropped = np.ascontiguousarray(pixels[min_y : min_y + height, min_x : min_x + width])

        return ProcessedCharacter(
            pixels=cropped,
            width=width,
            height=height,
            max_y=max_y,
        )

    @staticmethod
    def _validate(pixels: np.ndarray) -> None:
        if not isinstance(pixels, np.ndarray):
            raise ExtractionError(f"expected a numpy array, got {type(pixels).__name__}")
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ExtractionError(f"expected an RGBA bitmap, got shape {pixels.shape}")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise ExtractionError("bitmap has no pixels")
        if pixels.dtype != np.uint8:
            raise ExtractionError(f"expected uint8 channels, got {pixels.dtype}")
