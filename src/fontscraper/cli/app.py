"""CLI application entry point for fontscraper.

This module provides the main CLI interface using Typer.
"""

from io import BytesIO
from pathlib import Path
from typing import Annotated

import typer
from fontTools.ttLib import TTFont

from fontscraper import __version__
from fontscraper.cli.output import (
    console,
    create_progress,
    print_batch_summary,
    print_error,
    print_failed_glyphs,
    print_header,
    print_saved,
    print_source_info,
    print_step,
    print_success,
)
from fontscraper.config import (
    FontConfig,
    FontScraperSettings,
    LoggingConfig,
    TracingConfig,
)
from fontscraper.core import DEFAULT_CHARSET, BatchProcessor, BatchResult, unique_chars
from fontscraper.domain import GlyphRecord
from fontscraper.exceptions import FontScraperError
from fontscraper.io import (
    DirectoryImageSource,
    FontAssembler,
    HttpImageSource,
    ProjectFile,
    extract_base_url,
    load_project,
    save_project,
    write_font,
)
from fontscraper.io.preview import write_preview
from fontscraper.io.source import ImageSource, char_filename
from fontscraper.utils import configure_logging

# Create the Typer app
app = typer.Typer(
    name="fontscraper",
    help="Build TrueType fonts from rendered character images.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]FontScraper[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Build TrueType fonts from rendered character images."""


@app.command()
def build(
    url: Annotated[
        str | None,
        typer.Argument(
            help="Font render URL (https://domain.com/render/APP_ID/font/MD5_HASH)",
            show_default=False,
        ),
    ] = None,
    name: Annotated[
        str,
        typer.Option(
            "--name",
            "-n",
            help="Font family name",
        ),
    ] = "Untitled Font",
    charset: Annotated[
        str,
        typer.Option(
            "--charset",
            "-c",
            help="Characters to fetch (default: letters, digits and basic punctuation)",
            show_default=False,
        ),
    ] = DEFAULT_CHARSET,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output font path (default: {name}.ttf)",
        ),
    ] = None,
    project: Annotated[
        Path | None,
        typer.Option(
            "--project",
            "-p",
            help="Also save a .scrap project file",
        ),
    ] = None,
    source_dir: Annotated[
        Path | None,
        typer.Option(
            "--source-dir",
            help="Read renders from U+XXXX.png files instead of a URL",
        ),
    ] = None,
    units_per_em: Annotated[
        int,
        typer.Option(
            "--upm",
            help="Units per em of the generated font",
            min=16,
            max=16384,
        ),
    ] = 256,
    merge_rows: Annotated[
        bool,
        typer.Option(
            "--merge-rows",
            help="Merge identical pixel runs on consecutive rows",
        ),
    ] = False,
    previews: Annotated[
        Path | None,
        typer.Option(
            "--previews",
            help="Write cropped PNG previews to this directory",
        ),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
) -> None:
    """Fetch every character of a charset and assemble them into a font.

    Example:
        fontscraper build https://example.com/render/1/font/<md5> --name "My Font"

    This will create My_Font.ttf with one glyph per successfully fetched character.
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    if url is not None and source_dir is not None:
        print_error(
            "Provide either a render URL or --source-dir, not both",
            details="Exactly one image source is required.",
        )
        raise typer.Exit(code=1)

    if not name.strip():
        print_error("Font family name cannot be empty")
        raise typer.Exit(code=1)
    name = name.strip()

    chars = unique_chars(charset)
    if not chars:
        print_error("Charset is empty")
        raise typer.Exit(code=1)

    settings = FontScraperSettings(
        tracing=TracingConfig(merge_rows=merge_rows),
        font=FontConfig(units_per_em=units_per_em),
        logging=LoggingConfig(
            log_file=log_file,
            log_level=log_level if not quiet else "WARNING",
        ),
    )

    if not quiet:
        print_header(__version__)

    http_source: HttpImageSource | None = None
    try:
        source: ImageSource
        if source_dir is not None:
            if not source_dir.is_dir():
                print_error(f"Source directory not found: {source_dir}")
                raise typer.Exit(code=1)
            source = DirectoryImageSource(source_dir)
            source_label = str(source_dir)
            source_url = ""
        elif url is not None:
            base_url = extract_base_url(url)
            source = http_source = HttpImageSource(base_url, settings.source)
            source_label = base_url
            source_url = url
        else:
            print_error(
                "Provide either a render URL or --source-dir",
                details="Exactly one image source is required.",
            )
            raise typer.Exit(code=1)

        logger = configure_logging(
            log_file=settings.logging.log_file,
            console_level=settings.logging.log_level,
            file_level=settings.logging.file_log_level,
            quiet=quiet,
        )

        if not quiet:
            print_step("Fetching characters")
            print_source_info(source_label, name, len(chars), units_per_em)

        processor = BatchProcessor(settings, source, logger=logger)
        result = _run_batch(processor, "".join(chars), quiet)

        if not quiet:
            print_batch_summary(
                done=len(result.done),
                errors=len(result.failed),
                baseline=result.baseline,
                duration_s=result.stats.duration_seconds,
            )
            print_failed_glyphs(result.failed, verbose)

        if previews is not None:
            for char, processed in result.processed.items():
                write_preview(processed, previews / char_filename(char))
            if not quiet:
                print_saved(str(previews), "Previews")

        if project is not None:
            save_project(
                ProjectFile.from_records(
                    name,
                    result.records,
                    source_url=source_url,
                    charset="".join(chars),
                    units_per_em=units_per_em,
                ),
                project,
            )
            if not quiet:
                print_saved(str(project), "Project")

        if not result.any_success:
            print_error("No characters could be processed. Nothing to assemble.")
            raise typer.Exit(code=1)

        if not quiet:
            print_step("Assembling font")

        output_path = output or _default_font_path(name)
        _assemble_and_write(result.records, name, FontAssembler(settings.font), output_path, quiet)

    except FontScraperError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        # Re-raise typer.Exit to allow clean exits
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)
    finally:
        if http_source is not None:
            http_source.close()


@app.command()
def export(
    project_file: Annotated[
        Path,
        typer.Argument(
            help="Path to a .scrap project file",
            show_default=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output font path (default: {name}.ttf)",
        ),
    ] = None,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
) -> None:
    """Assemble a font from a saved project without fetching anything."""
    if not project_file.is_file():
        print_error(
            f"Project file not found: {project_file}",
            details=f"The file '{project_file}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    try:
        loaded = load_project(project_file)
        records = loaded.records()

        if not quiet:
            print_header(__version__)
            print_step("Assembling font")
            print_source_info(
                str(project_file),
                loaded.font_family_name,
                len(records),
                loaded.units_per_em,
            )

        assembler = FontAssembler(FontConfig(units_per_em=loaded.units_per_em))
        output_path = output or _default_font_path(loaded.font_family_name)
        _assemble_and_write(records, loaded.font_family_name, assembler, output_path, quiet)

    except FontScraperError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


def _run_batch(processor: BatchProcessor, charset: str, quiet: bool) -> BatchResult:
    """Run a batch, showing a progress bar unless quiet."""
    if quiet:
        return processor.process(charset)

    with create_progress() as progress:
        task_id = progress.add_task("Processing", total=100)

        def update_progress(percent: int) -> None:
            progress.update(task_id, completed=percent)

        return processor.process(charset, progress_callback=update_progress)


def _assemble_and_write(
    records: list[GlyphRecord],
    family_name: str,
    assembler: FontAssembler,
    output_path: Path,
    quiet: bool,
) -> None:
    """Assemble records and write the font file."""
    data = assembler.assemble(records, family_name)
    write_font(data, output_path)

    if not quiet:
        print_success(
            output_path=str(output_path),
            file_size=_format_file_size(output_path),
            glyph_count=_glyph_count(data),
        )


def _glyph_count(data: bytes) -> int:
    """Number of glyphs in compiled font bytes, .notdef and space included."""
    font = TTFont(BytesIO(data))
    try:
        return font["maxp"].numGlyphs
    finally:
        font.close()


def _default_font_path(family_name: str) -> Path:
    """Default output path for a family name, e.g. 'My_Font.ttf'."""
    stem = "_".join(family_name.split()) or "font"
    return Path(f"{stem}.ttf")


def _format_file_size(path: Path) -> str:
    """Format file size in human-readable form.

    Args:
        path: Path to file

    Returns:
        Human-readable file size (e.g., "428 KB")
    """
    try:
        size_bytes = path.stat().st_size
        if size_bytes < 1024:
            return f"{size_bytes} B"
        elif size_bytes < 1024 * 1024:
            return f"{size_bytes / 1024:.0f} KB"
        else:
            return f"{size_bytes / (1024 * 1024):.1f} MB"
    except OSError:
        return "unknown"


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
