"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars and formatted messages.
"""

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.text import Text

from svgs2fonts.domain import BatchSummary, FormatBatchResult

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for icon or directory processing.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]svgs2fonts[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_source_info(src: str, icon_count: int, formats: list[str]) -> None:
    """Print source directory information."""
    # Use Text to safely handle paths with special characters
    line = Text("  ")
    line.append(src)
    console.print(line)
    console.print(f"  {icon_count:,} icons {SYM_DOT} {', '.join(formats)}")


def format_file_size(size_bytes: int | None) -> str:
    """Format a byte count in human-readable form (e.g. "12 KB")."""
    if size_bytes is None:
        return "unknown"
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.0f} KB"
    else:
        return f"{size_bytes / (1024 * 1024):.1f} MB"


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_success(
    dist: str,
    total_time_s: float,
    processed: int,
    skipped: int,
    formats: FormatBatchResult | None = None,
) -> None:
    """Print success message with a per-format summary.

    Args:
        dist: Output directory
        total_time_s: Total build time in seconds
        processed: Number of icons written to the font
        skipped: Number of icons that could not be read
        formats: Font stage result, if it ran
    """
    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {_format_time(total_time_s)}")

    line = Text("  ")
    line.append(dist, style="bold")
    console.print(line)

    skipped_style = "yellow" if skipped > 0 else "green"
    console.print(
        f"  {processed} icons {SYM_DOT} [{skipped_style}]{skipped} skipped[/{skipped_style}]"
    )

    if formats is not None:
        for result in formats.successful:
            console.print(
                f"  {result.format:<6} {format_file_size(result.file_size)} "
                f"{SYM_DOT} {result.duration_ms:.0f}ms"
            )
        if formats.compression_ratio is not None:
            console.print(f"  WOFF2 saves {formats.compression_ratio}% over TTF")


def print_batch_summary(summary: BatchSummary, total_time_s: float, verbose: bool) -> None:
    """Print batch completion counts.

    Args:
        summary: Aggregated batch results
        total_time_s: Total batch time in seconds
        verbose: Whether to list each failure
    """
    style = "green" if summary.failed == 0 else "yellow"
    console.print(
        f"\n[bold {style}]{SYM_OK} Batch complete[/bold {style}] in {_format_time(total_time_s)}"
    )
    failed_style = "red" if summary.failed > 0 else "green"
    console.print(
        f"  {summary.successful} successful {SYM_DOT} "
        f"[{failed_style}]{summary.failed} failed[/{failed_style}] {SYM_DOT} {summary.total} total"
    )
    if verbose:
        for error in summary.errors:
            console.print(f"  {SYM_ERR} {error}")


def print_performance(summary: str) -> None:
    """Print the phase timing report."""
    console.print("\n[bold]Performance[/bold]")
    for line in summary.splitlines():
        console.print(f"  {line}")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
