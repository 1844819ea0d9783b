"""Exception hierarchy for FontScraper."""


class FontScraperError(Exception):
    """Base exception for all FontScraper errors."""

    pass


class CharacterError(FontScraperError):
    """Errors confined to a single character of a batch.

    The batch pipeline recovers from these locally: the affected glyph is
    flagged as failed and processing continues with the next character.
    """

    pass


class AcquisitionError(CharacterError):
    """The image source could not deliver a bitmap for a character."""

    def __init__(self, char: str, reason: str) -> None:
        self.char = char
        self.reason = reason
        super().__init__(f"Failed to acquire image for {char!r}: {reason}")


class ExtractionError(CharacterError):
    """A bitmap could not be separated from its background."""

    def __init__(self, reason: str, char: str | None = None) -> None:
        self.char = char
        self.reason = reason
        if char is None:
            super().__init__(f"Foreground extraction failed: {reason}")
        else:
            super().__init__(f"Foreground extraction failed for {char!r}: {reason}")


class TraceError(CharacterError):
    """A bitmap could not be vectorized."""

    def __init__(self, reason: str, char: str | None = None) -> None:
        self.char = char
        self.reason = reason
        if char is None:
            super().__init__(f"Outline tracing failed: {reason}")
        else:
            super().__init__(f"Outline tracing failed for {char!r}: {reason}")


class GlyphStateError(FontScraperError):
    """Illegal glyph status transition or edit."""

    def __init__(self, char: str, current: str, target: str) -> None:
        self.char = char
        self.current = current
        self.target = target
        super().__init__(f"Glyph {char!r} cannot move from '{current}' to '{target}'")


class AssemblyError(FontScraperError):
    """The font binary could not be built."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Font assembly failed: {reason}")


class InvalidSourceUrlError(FontScraperError):
    """Render URL does not match the expected endpoint layout."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(
            f"Invalid font URL '{url}'. Expected format: "
            "https://domain.com/render/APP_ID/font/MD5_HASH"
        )


class ProjectError(FontScraperError):
    """Errors related to project files."""

    pass


class ProjectLoadError(ProjectError):
    """Error loading a project file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to open project '{path}': {reason}")


class ProjectSaveError(ProjectError):
    """Error saving a project file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save project '{path}': {reason}")
