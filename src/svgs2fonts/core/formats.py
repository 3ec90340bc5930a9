"""Font format registry and concurrent format conversion.

Key components:
- FontFormat: Registry entry describing one output format
- FORMAT_REGISTRY: Format id to FontFormat
- FormatConverter: Per-pipeline converter with a cached TTF buffer
"""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from svgs2fonts.config import BuildSettings
from svgs2fonts.domain import FontFormatResult, FormatBatchResult
from svgs2fonts.exceptions import FontConversionError, UnsupportedFormatError
from svgs2fonts.io.converter import svg_font_to_ttf, ttf_to_eot, ttf_to_woff, ttf_to_woff2
from svgs2fonts.io.writer import write_bytes

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class FontFormat:
    """A registered output format.

    Attributes:
        name: Format id used in settings (e.g. "woff2")
        extension: File extension without dot
        mime_type: MIME type used in demo CSS
        description: Human-readable description
        convert: TTF bytes to format bytes; None for the SVG font itself
    """

    name: str
    extension: str
    mime_type: str
    description: str
    convert: Callable[[bytes], bytes] | None

    @property
    def css_format(self) -> str:
        """Value for the ``format()`` hint of a CSS ``src`` entry."""
        return CSS_FORMAT_HINTS[self.name]


def _identity(data: bytes) -> bytes:
    return data


CSS_FORMAT_HINTS: dict[str, str] = {
    "svg": "svg",
    "ttf": "truetype",
    "eot": "embedded-opentype",
    "woff": "woff",
    "woff2": "woff2",
}

FORMAT_REGISTRY: dict[str, FontFormat] = {
    "svg": FontFormat("svg", "svg", "image/svg+xml", "SVG font", None),
    "ttf": FontFormat("ttf", "ttf", "font/ttf", "TrueType font", _identity),
    "eot": FontFormat(
        "eot", "eot", "application/vnd.ms-fontobject", "Embedded OpenType font", ttf_to_eot
    ),
    "woff": FontFormat("woff", "woff", "font/woff", "Web Open Font Format", ttf_to_woff),
    "woff2": FontFormat("woff2", "woff2", "font/woff2", "Web Open Font Format 2", ttf_to_woff2),
}


def get_format(name: str) -> FontFormat:
    """Look up a registered format.

    Raises:
        UnsupportedFormatError: If the format is not registered
    """
    try:
        return FORMAT_REGISTRY[name]
    except KeyError:
        raise UnsupportedFormatError([name], list(FORMAT_REGISTRY)) from None


def validate_formats(formats: list[str]) -> list[FontFormat]:
    """Resolve format ids, rejecting the whole request on any unknown id.

    Raises:
        UnsupportedFormatError: Listing every unknown format
    """
    unknown = [name for name in formats if name not in FORMAT_REGISTRY]
    if unknown:
        raise UnsupportedFormatError(unknown, list(FORMAT_REGISTRY))
    return [FORMAT_REGISTRY[name] for name in formats]


class FormatConverter:
    """Converts the intermediate SVG font into the requested formats.

    The artifact text and the decoded TTF buffer are computed at most once
    per converter and shared by every concurrent conversion.

    Example:
        converter = FormatConverter(settings)
        batch = await converter.generate_batch(["ttf", "woff2"])
        converter.cleanup()
    """

    def __init__(self, settings: BuildSettings) -> None:
        self._settings = settings
        self._svg_text: str | None = None
        self._ttf_data: bytes | None = None
        self._lock = asyncio.Lock()

    async def svg_content(self) -> str:
        """Text of the SVG font artifact (cached)."""
        async with self._lock:
            if self._svg_text is None:
                self._svg_text = await asyncio.to_thread(
                    self._settings.svg_font_path.read_text, encoding="utf-8"
                )
            return self._svg_text

    async def ttf_buffer(self) -> bytes:
        """TrueType data compiled from the artifact (cached)."""
        svg_text = await self.svg_content()
        async with self._lock:
            if self._ttf_data is None:
                self._ttf_data = await asyncio.to_thread(
                    svg_font_to_ttf, svg_text, self._settings.font_name
                )
                logger.debug("TTF buffer compiled", size=len(self._ttf_data))
            return self._ttf_data

    async def generate_format(self, font_format: str) -> FontFormatResult:
        """Generate and write one format. Never raises."""
        started = time.perf_counter()
        try:
            entry = get_format(font_format)
            if entry.convert is None:
                output_path = self._settings.svg_font_path
                file_size = (await asyncio.to_thread(output_path.stat)).st_size
            else:
                ttf_data = await self.ttf_buffer()
                try:
                    data = await asyncio.to_thread(entry.convert, ttf_data)
                except Exception as e:
                    raise FontConversionError(font_format, str(e)) from e
                output_path = self._settings.output_path(entry.extension)
                file_size = await asyncio.to_thread(write_bytes, output_path, data)
        except Exception as e:
            duration_ms = (time.perf_counter() - started) * 1000
            logger.error("Font format failed", format=font_format, error=str(e))
            return FontFormatResult(
                format=font_format,
                success=False,
                duration_ms=duration_ms,
                error=e,
            )

        duration_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "Font format generated",
            format=font_format,
            path=str(output_path),
            size=file_size,
            duration_ms=round(duration_ms, 2),
        )
        return FontFormatResult(
            format=font_format,
            success=True,
            output_path=output_path,
            file_size=file_size,
            duration_ms=duration_ms,
        )

    async def generate_batch(self, formats: list[str]) -> FormatBatchResult:
        """Generate several formats concurrently.

        Raises:
            UnsupportedFormatError: Before any work if a format is unknown
        """
        validate_formats(formats)
        started = time.perf_counter()

        results = await asyncio.gather(*(self.generate_format(name) for name in formats))

        successful = [result for result in results if result.success]
        failed = [result for result in results if not result.success]
        return FormatBatchResult(
            successful=successful,
            failed=failed,
            total_duration_ms=(time.perf_counter() - started) * 1000,
            compression_ratio=_compression_ratio(successful),
        )

    def memory_usage(self) -> dict[str, int]:
        """Sizes in bytes of the cached buffers."""
        svg_size = len(self._svg_text.encode("utf-8")) if self._svg_text is not None else 0
        ttf_size = len(self._ttf_data) if self._ttf_data is not None else 0
        return {"svg": svg_size, "ttf": ttf_size, "total": svg_size + ttf_size}

    def cleanup(self) -> None:
        """Release cached buffers."""
        self._svg_text = None
        self._ttf_data = None


def _compression_ratio(successful: list[FontFormatResult]) -> int | None:
    """Percent saved by WOFF2 relative to TTF, when both were generated."""
    sizes = {result.format: result.file_size for result in successful}
    ttf_size = sizes.get("ttf")
    woff2_size = sizes.get("woff2")
    if not ttf_size or woff2_size is None:
        return None
    return round((1 - woff2_size / ttf_size) * 100)
