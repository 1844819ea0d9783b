"""I/O layer for fontscraper.

This module handles everything that crosses the process boundary: fetching
character renders, writing the assembled font binary, and reading and writing
project files.

Key responsibilities:
- Fetch and decode character renders (HTTP or local directory)
- Convert outlines to and from SVG path strings
- Assemble TrueType fonts with fonttools
- Save and load .scrap project files

Key classes:
- HttpImageSource / DirectoryImageSource: Image sources
- FontAssembler: Build TrueType binaries
- ProjectFile: Saved project document
"""

from fontscraper.io.assembler import FontAssembler, FontMetrics, write_font
from fontscraper.io.pathdata import outline_to_path_data, path_data_to_outline
from fontscraper.io.project import ProjectFile, load_project, save_project
from fontscraper.io.source import (
    DirectoryImageSource,
    HttpImageSource,
    ImageSource,
    extract_base_url,
)

__all__ = [
    "DirectoryImageSource",
    "FontAssembler",
    "FontMetrics",
    "HttpImageSource",
    "ImageSource",
    "ProjectFile",
    "extract_base_url",
    "load_project",
    "outline_to_path_data",
    "path_data_to_outline",
    "save_project",
    "write_font",
]
