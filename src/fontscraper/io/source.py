"""Image sources supplying one rendered bitmap per character.

The pipeline only depends on the ImageSource protocol: given a character,
return an RGBA numpy array of shape (height, width, 4) or raise
AcquisitionError. Two implementations are provided:

- HttpImageSource: fetches renders from a font render endpoint
- DirectoryImageSource: reads pre-rendered PNG files from disk
"""

import re
from io import BytesIO
from pathlib import Path
from typing import Protocol
from urllib.parse import urlsplit

import numpy as np
import requests
import structlog
from PIL import Image, UnidentifiedImageError

from fontscraper.config import SourceConfig
from fontscraper.exceptions import AcquisitionError, InvalidSourceUrlError

logger = structlog.get_logger(__name__)

_RENDER_PATH_RE = re.compile(r"^/render/\d+/font/[a-f0-9]{32}$", re.IGNORECASE)


class ImageSource(Protocol):
    """Anything that can render a character to an RGBA bitmap."""

    def fetch(self, char: str) -> np.ndarray:
        """Return an RGBA array for char or raise AcquisitionError."""
        ...


def extract_base_url(url: str) -> str:
    """Validate a render URL and strip its query string.

    Only URLs of the form scheme://host/render/<app id>/font/<md5> are
    accepted.

    Args:
        url: Full render URL as copied by the user

    Returns:
        scheme://host/path without query or fragment

    Raises:
        InvalidSourceUrlError: If the URL does not match
    """
    try:
        parts = urlsplit(url.strip())
    except ValueError as e:
        raise InvalidSourceUrlError(url) from e

    if not parts.scheme or not parts.netloc or not _RENDER_PATH_RE.match(parts.path):
        raise InvalidSourceUrlError(url)

    return f"{parts.scheme}://{parts.netloc}{parts.path}"


def decode_image(data: bytes) -> np.ndarray:
    """Decode encoded image bytes to a writable RGBA uint8 array.

    Raises:
        OSError: If Pillow cannot decode the data
    """
    with Image.open(BytesIO(data)) as image:
        rgba = image.convert("RGBA")
    return np.array(rgba, dtype=np.uint8)


def char_filename(char: str) -> str:
    """File name used for a character's render, e.g. 'U+0041.png'."""
    return "_".join(f"U+{ord(c):04X}" for c in char) + ".png"


class HttpImageSource:
    """Fetches character renders from a font render endpoint.

    Example:
        source = HttpImageSource(extract_base_url(url))
        pixels = source.fetch("A")
    """

    def __init__(
        self,
        base_url: str,
        config: SourceConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the source.

        Args:
            base_url: Validated endpoint URL without query string
            config: Render request settings
            session: HTTP session to reuse (a new one is created if None)
        """
        self.base_url = base_url
        self.config = config or SourceConfig()
        self._session = session or requests.Session()

    def request_params(self, char: str) -> dict[str, str | int]:
        """Query parameters for one render request."""
        return {
            "rt": char,
            "rs": self.config.render_size,
            "fg": self.config.foreground,
            "bg": self.config.background,
            "w": self.config.width_param,
        }

    def fetch(self, char: str) -> np.ndarray:
        """Download and decode the render of one character.

        Raises:
            AcquisitionError: On transport errors, non-200 responses or
                undecodable image data
        """
        try:
            response = self._session.get(
                self.base_url,
                params=self.request_params(char),
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            raise AcquisitionError(char, str(e)) from e

        if response.status_code != 200:
            raise AcquisitionError(char, f"HTTP {response.status_code} from {self.base_url}")

        try:
            pixels = decode_image(response.content)
        except (UnidentifiedImageError, OSError) as e:
            raise AcquisitionError(char, f"undecodable image data: {e}") from e

        logger.debug("Image fetched", char=char, width=pixels.shape[1], height=pixels.shape[0])
        return pixels

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def __enter__(self) -> "HttpImageSource":
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        self.close()


class DirectoryImageSource:
    """Reads character renders from PNG files named by code point.

    Example:
        source = DirectoryImageSource(Path("renders"))
        pixels = source.fetch("A")  # reads renders/U+0041.png
    """

    def __init__(self, root: Path) -> None:
        self.root = root

    def path_for(self, char: str) -> Path:
        return self.root / char_filename(char)

    def fetch(self, char: str) -> np.ndarray:
        path = self.path_for(char)
        if not path.exists():
            raise AcquisitionError(char, f"no render at {path}")
        try:
            return decode_image(path.read_bytes())
        except (UnidentifiedImageError, OSError) as e:
            raise AcquisitionError(char, f"undecodable image {path}: {e}") from e
