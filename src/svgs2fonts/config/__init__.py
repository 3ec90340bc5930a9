"""Configuration management for svgs2fonts.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or the Python API.

Key classes:
- BuildSettings: Options for one build
- LoggingConfig: Logging settings
"""

from svgs2fonts.config.settings import (
    FONT_FORMATS,
    BuildSettings,
    LoggingConfig,
    create_settings,
    normalize_options,
)

__all__ = [
    "FONT_FORMATS",
    "BuildSettings",
    "LoggingConfig",
    "create_settings",
    "normalize_options",
]
