"""PNG previews of processed characters."""

from pathlib import Path

from PIL import Image

from fontscraper.domain import ProcessedCharacter


def to_image(processed: ProcessedCharacter) -> Image.Image:
    """Wrap a processed bitmap as an RGBA Pillow image."""
    return Image.fromarray(processed.pixels)


def write_preview(processed: ProcessedCharacter, path: Path) -> None:
    """Save the cropped, transparent-background bitmap as PNG."""
    path.parent.mkdir(parents=True, exist_ok=True)
    to_image(processed).save(path, format="PNG")
