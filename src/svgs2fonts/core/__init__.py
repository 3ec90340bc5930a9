"""Core build stages for svgs2fonts.

This module contains the build logic:

- Code point assignment (codepoints)
- Streaming SVG font assembly (assembler)
- Font format registry and conversion (formats)
- Demo pages (demo)
- Single-directory pipeline and batch scheduler (pipeline, batch)
- Top-level entry points (runner)
"""

from svgs2fonts.core.assembler import AssemblyObserver, GlyphStreamAssembler, LoggingObserver
from svgs2fonts.core.batch import BatchScheduler, derive_output_dir
from svgs2fonts.core.codepoints import (
    CodePointAssigner,
    CodePointAssignment,
    CodePointContext,
    djb2_hash,
)
from svgs2fonts.core.demo import DemoBuilder, render_font_face
from svgs2fonts.core.formats import FORMAT_REGISTRY, FontFormat, FormatConverter
from svgs2fonts.core.pipeline import DirectoryPipeline
from svgs2fonts.core.runner import build, run

__all__ = [
    "FORMAT_REGISTRY",
    "AssemblyObserver",
    "BatchScheduler",
    "CodePointAssigner",
    "CodePointAssignment",
    "CodePointContext",
    "DemoBuilder",
    "DirectoryPipeline",
    "FontFormat",
    "FormatConverter",
    "GlyphStreamAssembler",
    "LoggingObserver",
    "build",
    "derive_output_dir",
    "djb2_hash",
    "render_font_face",
    "run",
]
