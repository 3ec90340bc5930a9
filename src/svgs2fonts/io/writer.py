"""SVG font serialization and output file helpers.

This module renders the pieces of the intermediate SVG font and writes
build outputs to disk.
"""

import asyncio
from html import escape
from pathlib import Path
from typing import BinaryIO

from svgs2fonts.domain.icon import GlyphRecord

SVG_FONT_PROLOG = (
    '<?xml version="1.0" standalone="no"?>\n'
    '<!DOCTYPE svg PUBLIC "-//W3C//DTD SVG 1.1//EN" '
    '"http://www.w3.org/Graphics/SVG/1.1/DTD/svg11.dtd" >\n'
)


def svg_font_header(font_name: str, font_height: int, descent: int = 0) -> str:
    """Render everything up to and including the missing glyph."""
    family = escape(font_name, quote=True)
    return (
        f"{SVG_FONT_PROLOG}"
        '<svg xmlns="http://www.w3.org/2000/svg">\n'
        "<defs>\n"
        f'  <font id="{family}" horiz-adv-x="{font_height}">\n'
        f'    <font-face font-family="{family}" units-per-em="{font_height}" '
        f'ascent="{font_height - descent}" descent="{-descent}" />\n'
        '    <missing-glyph horiz-adv-x="0" />\n'
    )


def glyph_element(record: GlyphRecord) -> str:
    """Render one ``<glyph>`` element."""
    return (
        f'    <glyph glyph-name="{escape(record.name, quote=True)}" '
        f'unicode="&#x{record.hex_codepoint};" '
        f'horiz-adv-x="{record.advance_width}" '
        f'd="{escape(record.path_data, quote=True)}" />\n'
    )


def svg_font_footer() -> str:
    return "  </font>\n</defs>\n</svg>\n"


def ensure_directory(directory: Path) -> Path:
    """Create a directory (and parents) if it does not exist yet."""
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def write_bytes(path: Path, data: bytes) -> int:
    """Write bytes to a file, creating its directory.

    Returns:
        Size of the written file in bytes
    """
    ensure_directory(path.parent)
    path.write_bytes(data)
    return path.stat().st_size


def write_text(path: Path, text: str) -> int:
    """Write UTF-8 text to a file, creating its directory.

    Returns:
        Size of the written file in bytes
    """
    return write_bytes(path, text.encode("utf-8"))


class FontFileSink:
    """Destination for streamed SVG font text.

    Writes happen in a worker thread so the event loop keeps serving
    other pipelines. ``discard`` removes a partially written file.

    Example:
        sink = FontFileSink(Path("dist/icons.svg"))
        await sink.open()
        await sink.write(chunk)
        await sink.close()
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._handle: BinaryIO | None = None
        self._bytes_written = 0

    @property
    def path(self) -> Path:
        return self._path

    @property
    def bytes_written(self) -> int:
        return self._bytes_written

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    async def open(self) -> None:
        await asyncio.to_thread(ensure_directory, self._path.parent)
        self._handle = await asyncio.to_thread(self._path.open, "wb")

    async def write(self, chunk: str) -> None:
        if self._handle is None:
            raise RuntimeError("Sink not open. Call open() first.")
        data = chunk.encode("utf-8")
        await asyncio.to_thread(self._handle.write, data)
        self._bytes_written += len(data)

    async def close(self) -> None:
        """Flush and close the file. Safe to call more than once."""
        handle, self._handle = self._handle, None
        if handle is not None:
            await asyncio.to_thread(handle.close)

    async def discard(self) -> None:
        """Close and delete the file."""
        await self.close()
        await asyncio.to_thread(self._path.unlink, missing_ok=True)
