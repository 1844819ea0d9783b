"""Shared fixtures for fontscraper tests."""

from collections.abc import Callable

import numpy as np
import pytest

Canvas = Callable[..., np.ndarray]


def make_canvas(
    width: int = 16,
    height: int = 16,
    boxes: tuple[tuple[int, int, int, int], ...] = (),
    color: tuple[int, int, int] = (0, 0, 0),
) -> np.ndarray:
    """Build an opaque white RGBA canvas with filled boxes.

    Each box is (x0, y0, x1, y1), inclusive, in image coordinates.
    """
    pixels = np.full((height, width, 4), 255, dtype=np.uint8)
    for x0, y0, x1, y1 in boxes:
        pixels[y0 : y1 + 1, x0 : x1 + 1, :3] = color
    return pixels


@pytest.fixture
def canvas() -> Canvas:
    """Factory for white RGBA canvases with black boxes."""
    return make_canvas


class FakeImageSource:
    """In-memory image source returning canned bitmaps.

    Characters mapped to an exception instance raise it instead.
    """

    def __init__(self, images: dict[str, np.ndarray | Exception]) -> None:
        self.images = images
        self.calls: list[str] = []

    def fetch(self, char: str) -> np.ndarray:
        self.calls.append(char)
        image = self.images[char]
        if isinstance(image, Exception):
            raise image
        return image.copy()


@pytest.fixture
def fake_source() -> Callable[[dict[str, np.ndarray | Exception]], FakeImageSource]:
    """Factory for in-memory image sources."""
    return FakeImageSource
