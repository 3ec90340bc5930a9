"""Icon and glyph types.

This module defines the types that flow through glyph assembly:
- IconSource: One discovered icon file
- IconOutline: An icon's outline normalized to font units
- GlyphRecord: One glyph ready to be written to the SVG font
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class IconSource:
    """A single icon file discovered in a source directory.

    Attributes:
        name: File name without its .svg extension
        path: Absolute path to the icon file
    """

    name: str
    path: Path


@dataclass(frozen=True, slots=True)
class IconOutline:
    """Icon outline transformed into the font's coordinate system.

    Attributes:
        path_data: SVG path data, y axis pointing up, in font units
        advance_width: Horizontal advance in font units
    """

    path_data: str
    advance_width: int


@dataclass(frozen=True, slots=True)
class GlyphRecord:
    """A glyph emitted while streaming the SVG font.

    Records are produced one at a time and never collected.

    Attributes:
        name: Icon name, used as glyph name
        codepoint: Assigned code point
        source_path: Icon file the outline was read from
        path_data: Outline path data in font units
        advance_width: Horizontal advance in font units
    """

    name: str
    codepoint: int
    source_path: Path
    path_data: str
    advance_width: int

    @property
    def hex_codepoint(self) -> str:
        """Lower-case hexadecimal code point without prefix."""
        return f"{self.codepoint:x}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for logging."""
        return {
            "name": self.name,
            "codepoint": self.codepoint,
            "source": str(self.source_path),
            "advance_width": self.advance_width,
        }
