"""Configuration settings for FontScraper."""

from pathlib import Path

from pydantic import BaseModel, Field


class ExtractionConfig(BaseModel):
    """Configuration for background removal and opacity classification."""

    background_color: tuple[int, int, int] = Field(
        default=(255, 255, 255),
        description="RGB color treated as background",
    )
    tolerance: int = Field(
        default=15,
        ge=0,
        le=255,
        description="Per-channel distance from the background color still counted as background",
    )
    alpha_threshold: int = Field(
        default=128,
        ge=0,
        le=255,
        description="Pixels with alpha strictly above this value are opaque when tracing",
    )


class SourceConfig(BaseModel):
    """Configuration for the remote render endpoint.

    The render size also defines the fallback baseline used when no
    character in a batch produced any foreground pixels.
    """

    render_size: int = Field(
        default=256,
        ge=8,
        le=4096,
        description="Requested render size ('rs' query parameter)",
    )
    width_param: int = Field(
        default=512,
        ge=8,
        le=8192,
        description="Requested image width ('w' query parameter)",
    )
    foreground: str = Field(
        default="000000",
        pattern=r"^[0-9A-Fa-f]{6}$",
        description="Foreground color as hex ('fg' query parameter)",
    )
    background: str = Field(
        default="FFFFFF",
        pattern=r"^[0-9A-Fa-f]{6}$",
        description="Background color as hex ('bg' query parameter)",
    )
    timeout: float = Field(
        default=30.0,
        gt=0.0,
        description="HTTP timeout in seconds",
    )

    @property
    def fallback_baseline(self) -> int:
        """Baseline row assumed when a batch yields no usable bottom edges."""
        return int(self.render_size * 0.8)


class TracingConfig(BaseModel):
    """Configuration for bitmap vectorization."""

    merge_rows: bool = Field(
        default=False,
        description="Merge identical runs on consecutive rows into taller rectangles",
    )


class FontConfig(BaseModel):
    """Configuration for the assembled font."""

    units_per_em: int = Field(
        default=256,
        ge=16,
        le=16384,
        description="Font units per em",
    )
    style_name: str = Field(
        default="Medium",
        description="Style label written to the name table",
    )
    version: str = Field(
        default="Version 1.000",
        description="Version string written to the name table",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class FontScraperSettings(BaseModel):
    """Main application settings."""

    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    source: SourceConfig = Field(default_factory=SourceConfig)
    tracing: TracingConfig = Field(default_factory=TracingConfig)
    font: FontConfig = Field(default_factory=FontConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> FontScraperSettings:
    """Get default application settings."""
    return FontScraperSettings()
