"""Command-line interface for fontscraper.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Progress bar across both batch stages
- Verbose/quiet output modes
- Project save and re-export
- Detailed error reporting
"""

from fontscraper.cli.app import cli, main

__all__ = ["cli", "main"]
