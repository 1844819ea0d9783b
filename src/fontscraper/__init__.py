"""FontScraper - Build outline fonts from rasterized character renderings.

FontScraper fetches one rendered bitmap per character from a font render
endpoint, strips the background, aligns every character to a shared baseline,
traces the pixels into rectilinear outlines and assembles a TrueType font.

Example:
    $ fontscraper build https://example.com/render/1/font/<md5> --name "My Font"

This will create My_Font.ttf containing one glyph per fetched character.
"""

__version__ = "0.1.0"
__author__ = "Dimosthenis Kaponis"

__all__ = ["__author__", "__version__"]
