"""File I/O layer for svgs2fonts.

This module handles reading icons and writing fonts. It keeps
svgpathtools and fontTools details out of the build stages.

Key responsibilities:
- Discover icon files and read their outlines
- Serialize the intermediate SVG font
- Convert the SVG font to TTF and the TTF to WOFF, WOFF2 and EOT
"""

from svgs2fonts.io.converter import (
    svg_font_to_ttf,
    ttf_to_eot,
    ttf_to_woff,
    ttf_to_woff2,
)
from svgs2fonts.io.reader import list_icon_sources, read_icon_outline
from svgs2fonts.io.writer import FontFileSink, write_bytes, write_text

__all__ = [
    "FontFileSink",
    "list_icon_sources",
    "read_icon_outline",
    "svg_font_to_ttf",
    "ttf_to_eot",
    "ttf_to_woff",
    "ttf_to_woff2",
    "write_bytes",
    "write_text",
]
