"""Configuration settings for svgs2fonts."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from svgs2fonts.exceptions import ConfigurationError

FONT_FORMATS: tuple[str, ...] = ("svg", "ttf", "eot", "woff", "woff2")

UNICODE_LIMIT = 0x110000

logger = structlog.get_logger(__name__)

# Legacy camelCase option names and the fields they map to
LEGACY_OPTION_NAMES: dict[str, str] = {
    "fontName": "font_name",
    "unicodeStart": "unicode_start",
    "startNumber": "unicode_start",
    "maxUnicode": "unicode_max",
    "fontFormats": "font_formats",
    "noDemo": "no_demo",
    "demoUnicodeHTML": "demo_unicode_html",
    "demoFontClassHTML": "demo_font_class_html",
    "batchMode": "batch_mode",
    "inputDirectories": "input_directories",
    "batchSize": "batch_size",
    "continueOnError": "continue_on_error",
    "outputPattern": "output_pattern",
    "maxConcurrency": "max_concurrency",
    "enableCache": "enable_cache",
    "progressCallback": "progress_callback",
    "performanceAnalysis": "performance_analysis",
    "fontHeight": "font_height",
    "centerHorizontally": "center_horizontally",
}

_REQUIRED_MESSAGES: dict[str, str] = {
    "src": "Source directory (src) is required",
    "dist": "Output directory (dist) is required",
    "font_name": "Font name must be a non-empty string",
}


class _FieldError(ValueError):
    """ValueError raised by a model-level validator on behalf of one field."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(message)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class BuildSettings(BaseModel):
    """Validated options for one font build (single directory or batch)."""

    src: Path = Field(description="Source directory containing SVG icons")
    dist: Path = Field(description="Output directory for generated files")
    font_name: str = Field(description="Font family name and output file base name")

    unicode_start: int = Field(
        default=10000,
        description="First code point of the assignment range",
    )
    unicode_max: int = Field(
        default=59999,
        description="End of the assignment range (exclusive)",
    )
    font_formats: list[str] = Field(
        default_factory=lambda: list(FONT_FORMATS),
        description="Font formats to generate",
    )
    no_demo: bool = Field(default=False, description="Skip demo HTML/CSS generation")
    demo_unicode_html: str = Field(default="demo_unicode.html")
    demo_font_class_html: str = Field(default="demo_fontclass.html")

    batch_mode: bool = Field(default=False, description="Process several directories")
    input_directories: list[Path] | None = Field(
        default=None,
        description="Directories processed in batch mode",
    )
    batch_size: int = Field(default=3, description="Directories processed concurrently")
    continue_on_error: bool = Field(
        default=True,
        description="Keep processing later chunks when a directory fails",
    )
    output_pattern: str = Field(
        default="{basename}",
        description="Per-directory output sub-path in batch mode ({basename}, {font_name})",
    )

    max_concurrency: int = Field(default=4, description="Concurrency hint")
    enable_cache: bool = Field(default=True, description="Cache hint")
    progress_callback: Callable[..., Any] | None = Field(
        default=None,
        description="Called with ProgressInfo after each batch chunk",
    )

    verbose: bool = Field(default=False, description="Diagnostic output")
    performance_analysis: bool = Field(default=False, description="Report phase timings")

    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for assembling the SVG font",
    )
    progress_interval: int = Field(
        default=10,
        ge=1,
        description="Report assembly progress every N icons",
    )
    font_height: int = Field(default=1000, ge=16, le=16384, description="Units per em")
    descent: int = Field(default=0, ge=0, description="Font descent in font units")
    center_horizontally: bool = Field(default=True, description="Center glyph outlines")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("src", "dist", mode="before")
    @classmethod
    def _require_path(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValueError("path is required")
        return value

    @field_validator("src")
    @classmethod
    def _check_source(cls, value: Path) -> Path:
        resolved = value.expanduser().resolve()
        if not resolved.is_dir():
            raise ValueError(f"Source directory does not exist: {resolved}")
        return resolved

    @field_validator("dist")
    @classmethod
    def _resolve_dist(cls, value: Path) -> Path:
        return value.expanduser().resolve()

    @field_validator("font_name", mode="before")
    @classmethod
    def _check_font_name(cls, value: Any) -> Any:
        if not isinstance(value, str) or not value.strip():
            raise ValueError(_REQUIRED_MESSAGES["font_name"])
        if "/" in value or "\\" in value:
            raise ValueError("Font name must not contain path separators")
        return value.strip()

    @field_validator("font_formats", mode="before")
    @classmethod
    def _check_formats(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = [part for part in value.split(",") if part.strip()]
        if not value:
            raise ValueError("At least one font format is required")
        normalized: list[str] = []
        for item in value:
            name = str(item).strip().lower()
            if name not in normalized:
                normalized.append(name)
        invalid = [name for name in normalized if name not in FONT_FORMATS]
        if invalid:
            raise ValueError(
                f"Invalid font formats: {', '.join(invalid)}. "
                f"Valid formats: {', '.join(FONT_FORMATS)}"
            )
        return normalized

    @field_validator("batch_size")
    @classmethod
    def _check_batch_size(cls, value: int) -> int:
        if value < 1:
            raise ValueError("Batch size must be a positive number")
        return value

    @field_validator("max_concurrency")
    @classmethod
    def _check_concurrency(cls, value: int) -> int:
        if value < 1:
            raise ValueError("Max concurrency must be a positive number")
        return value

    @field_validator("input_directories")
    @classmethod
    def _resolve_directories(cls, value: list[Path] | None) -> list[Path] | None:
        if value is None:
            return None
        return [directory.expanduser().resolve() for directory in value]

    @model_validator(mode="after")
    def _check_consistency(self) -> "BuildSettings":
        if not 0 <= self.unicode_start < UNICODE_LIMIT:
            raise _FieldError(
                "unicode_start",
                f"Unicode start must be between 0 and {UNICODE_LIMIT - 1:#x}",
            )
        if not self.unicode_start < self.unicode_max <= UNICODE_LIMIT:
            raise _FieldError(
                "unicode_max",
                f"Invalid unicode range: start {self.unicode_start} must be below "
                f"max {self.unicode_max} (at most {UNICODE_LIMIT:#x})",
            )
        if self.batch_mode and not self.input_directories:
            raise _FieldError(
                "input_directories",
                "Batch mode requires inputDirectories to be specified",
            )
        return self

    @property
    def svg_font_path(self) -> Path:
        """Path of the intermediate SVG font."""
        return self.dist / f"{self.font_name}.svg"

    def output_path(self, font_format: str) -> Path:
        """Path of the generated file for a font format."""
        return self.dist / f"{self.font_name}.{font_format}"

    def summary(self) -> str:
        """Human-readable configuration summary."""
        return (
            f"Source: {self.src}\n"
            f"Output: {self.dist}\n"
            f"Font Name: {self.font_name}\n"
            f"Formats: {', '.join(self.font_formats)}\n"
            f"Batch Mode: {self.batch_mode}"
        )

    def for_directory(self, directory: Path, dist: Path) -> "BuildSettings":
        """Settings for a single directory of a batch run.

        Raises:
            ConfigurationError: If the derived settings are invalid
        """
        data = self.model_dump()
        data.update(
            src=directory,
            dist=dist,
            batch_mode=False,
            input_directories=None,
        )
        return _validate(data)


def _validate(data: dict[str, Any]) -> BuildSettings:
    try:
        return BuildSettings(**data)
    except ValidationError as e:
        raise _to_configuration_error(e) from None


def _to_configuration_error(error: ValidationError) -> ConfigurationError:
    """Convert the first pydantic error into a ConfigurationError."""
    first = error.errors()[0]
    field = str(first["loc"][0]) if first["loc"] else None
    cause = first.get("ctx", {}).get("error")

    if isinstance(cause, _FieldError):
        return ConfigurationError(str(cause), cause.field)
    if first["type"] == "missing" or (cause is not None and str(cause) == "path is required"):
        message = _REQUIRED_MESSAGES.get(field or "", f"{field} is required")
        return ConfigurationError(message, field)
    if cause is not None:
        return ConfigurationError(str(cause), field)
    return ConfigurationError(f"Invalid value for {field}: {first['msg']}", field)


def normalize_options(options: dict[str, Any]) -> tuple[dict[str, Any], list[str]]:
    """Map legacy option names onto settings fields.

    Returns:
        Tuple of (normalized options, deprecation warnings)
    """
    normalized: dict[str, Any] = {}
    warnings: list[str] = []

    for key, value in options.items():
        if key == "debug":
            if value:
                warnings.append('The "debug" option is deprecated. Use "verbose" instead.')
                normalized.setdefault("verbose", True)
            continue
        name = LEGACY_OPTION_NAMES.get(key, key)
        if name == "unicode_start" and value is None:
            continue
        normalized[name] = value

    return normalized, warnings


def create_settings(**options: Any) -> BuildSettings:
    """Create validated build settings.

    Accepts snake_case field names as well as the legacy camelCase
    names listed in LEGACY_OPTION_NAMES.

    Raises:
        ConfigurationError: If a required option is missing or invalid
    """
    normalized, warnings = normalize_options(options)
    for warning in warnings:
        logger.warning("Deprecated option", message=warning)
    return _validate(normalized)
