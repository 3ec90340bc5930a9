"""Command-line interface for svgs2fonts.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Progress bars for icon and directory processing
- Single and batch builds
- Concise or verbose error reporting
"""

from svgs2fonts.cli.app import cli, main

__all__ = ["cli", "main"]
