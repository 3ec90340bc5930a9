"""Domain models for svgs2fonts.

This module contains the values that flow between build stages. All models are:

- Immutable (frozen dataclasses)
- Independent of fontTools and svgpathtools

Key classes:
- IconSource: A discovered icon file
- GlyphRecord: A glyph emitted into the SVG font
- AssemblyResult, FontFormatResult, FormatBatchResult: Stage outcomes
- ProgressInfo, BatchSummary: Batch reporting
"""

from svgs2fonts.domain.icon import GlyphRecord, IconOutline, IconSource
from svgs2fonts.domain.results import (
    AssemblyResult,
    AssemblyState,
    BatchSummary,
    FontFormatResult,
    FormatBatchResult,
    PipelineState,
    ProgressInfo,
)

__all__: list[str] = [
    # Enums
    "AssemblyState",
    "PipelineState",
    # Icons
    "IconSource",
    "IconOutline",
    "GlyphRecord",
    # Results
    "AssemblyResult",
    "FontFormatResult",
    "FormatBatchResult",
    "ProgressInfo",
    "BatchSummary",
]
