"""Utility functions for fontscraper.

This module provides utility functions including:

- Logging setup and configuration
- Batch statistics tracking
"""

from fontscraper.utils.logging import (
    BatchStats,
    ProcessingLogger,
    configure_logging,
)

__all__ = [
    "BatchStats",
    "ProcessingLogger",
    "configure_logging",
]
