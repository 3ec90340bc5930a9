"""Exception hierarchy for svgs2fonts."""

from pathlib import Path


class Svgs2FontsError(Exception):
    """Base exception for all svgs2fonts errors."""

    pass


class ConfigurationError(Svgs2FontsError):
    """Invalid or incomplete build configuration."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class IconError(Svgs2FontsError):
    """Errors related to reading individual icon files."""

    pass


class IconReadError(IconError):
    """An icon file could not be read or parsed."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to read icon '{path}': {reason}")


class CodePointError(Svgs2FontsError):
    """Errors related to code point assignment."""

    pass


class CodePointRangeExhaustedError(CodePointError):
    """Every code point in the configured range is already bound."""

    def __init__(self, start: int, maximum: int, capacity: int, requested: int | None = None) -> None:
        self.start = start
        self.maximum = maximum
        self.capacity = capacity
        self.requested = requested
        detail = f" ({requested} icons requested)" if requested is not None else ""
        super().__init__(
            f"Unicode range exhausted: cannot assign more than {capacity} code points "
            f"in range {start:#x}-{maximum:#x}{detail}"
        )


class AssemblyError(Svgs2FontsError):
    """Errors while assembling the SVG font."""

    pass


class AssemblyTimeoutError(AssemblyError):
    """SVG font assembly did not finish in time."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"Font creation timeout after {timeout:g}s")


class FontFormatError(Svgs2FontsError):
    """Errors related to font format conversion."""

    pass


class UnsupportedFormatError(FontFormatError):
    """One or more requested formats are not registered."""

    def __init__(self, formats: list[str], supported: list[str]) -> None:
        self.formats = formats
        self.supported = supported
        super().__init__(
            f"Invalid font formats: {', '.join(formats)}. "
            f"Valid formats: {', '.join(supported)}"
        )


class FontConversionError(FontFormatError):
    """A format conversion failed."""

    def __init__(self, font_format: str, reason: str) -> None:
        self.font_format = font_format
        self.reason = reason
        super().__init__(f"Failed to generate {font_format}: {reason}")


class StageError(Svgs2FontsError):
    """A pipeline stage reported failure.

    The message always starts with the stage text (e.g. "SVG processing failed"),
    followed by the underlying cause when one is known.
    """

    SVG = "SVG processing failed"
    FONT = "Font generation failed"
    DEMO = "Demo generation failed"

    def __init__(self, stage: str, cause: BaseException | str | None = None) -> None:
        self.stage = stage
        self.cause = cause
        message = stage if cause is None or str(cause) == "" else f"{stage}: {cause}"
        super().__init__(message)


class BatchError(Svgs2FontsError):
    """Batch processing stopped because directories failed."""

    def __init__(self, failed_count: int) -> None:
        self.failed_count = failed_count
        super().__init__(f"Batch processing failed: {failed_count} directories failed")
