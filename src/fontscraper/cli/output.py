"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars and formatted messages.
"""

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.text import Text

from fontscraper.domain import GlyphRecord

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for batch processing.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]FontScraper[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_source_info(source: str, family_name: str, char_count: int, upm: int) -> None:
    """Print batch source information.

    Args:
        source: Render URL or directory
        family_name: Font family name
        char_count: Number of unique characters requested
        upm: Units per em value
    """
    line1 = Text("  ")
    line1.append(source)
    console.print(line1)
    line2 = Text("  ")
    line2.append(family_name, style="bold")
    line2.append(f" {SYM_DOT} {char_count:,} characters {SYM_DOT} {upm:,} UPM")
    console.print(line2)


def print_failed_glyphs(records: list[GlyphRecord], verbose: bool) -> None:
    """Print characters that could not be processed.

    Args:
        records: Records in error state
        verbose: Whether to show every error message
    """
    if not records:
        return
    console.print(f"  [red]{len(records)}[/red] characters failed")
    shown = records if verbose else records[:5]
    for record in shown:
        line = Text("    ")
        line.append(repr(record.char), style="bold")
        line.append(f" {record.error_message or 'unknown error'}")
        console.print(line)
    if len(records) > len(shown):
        console.print(f"    {SYM_DOT}{SYM_DOT}{SYM_DOT} (+{len(records) - len(shown)} more)")


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_batch_summary(done: int, errors: int, baseline: int, duration_s: float) -> None:
    """Print batch statistics.

    Args:
        done: Number of characters traced
        errors: Number of characters that failed
        baseline: Shared baseline row
        duration_s: Batch duration in seconds
    """
    error_style = "red" if errors > 0 else "green"
    console.print(
        f"  {done} glyphs {SYM_DOT} baseline row {baseline} {SYM_DOT} "
        f"[{error_style}]{errors} errors[/{error_style}] {SYM_DOT} {_format_time(duration_s)}"
    )


def print_success(output_path: str, file_size: str, glyph_count: int) -> None:
    """Print success message with summary.

    Args:
        output_path: Path to output file
        file_size: Human-readable file size string
        glyph_count: Number of glyphs in the font (including .notdef and space)
    """
    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green]")

    line = Text("  ")
    line.append(output_path, style="bold")
    line.append(f" ({file_size})")
    console.print(line)
    console.print(f"  {glyph_count} glyphs")


def print_saved(path: str, kind: str) -> None:
    """Print a saved-file notice."""
    line = Text(f"  {SYM_OK} {kind} saved to ")
    line.append(path, style="bold")
    console.print(line)


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
