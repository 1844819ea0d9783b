"""Configuration management for fontscraper.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- ExtractionConfig: Background removal settings
- SourceConfig: Render endpoint settings
- TracingConfig: Vectorization settings
- FontConfig: Output font settings
- LoggingConfig: Logging settings
- FontScraperSettings: Main application settings
"""

from fontscraper.config.settings import (
    ExtractionConfig,
    FontConfig,
    FontScraperSettings,
    LoggingConfig,
    SourceConfig,
    TracingConfig,
    get_default_settings,
)

__all__ = [
    "ExtractionConfig",
    "FontConfig",
    "FontScraperSettings",
    "LoggingConfig",
    "SourceConfig",
    "TracingConfig",
    "get_default_settings",
]
