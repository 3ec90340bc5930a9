"""CLI application entry point for svgs2fonts.

This module provides the main CLI interface using Typer.
"""

import asyncio
import time
from pathlib import Path
from typing import Annotated

import typer
from rich.progress import Progress, TaskID

from svgs2fonts import __version__
from svgs2fonts.cli.output import (
    console,
    create_progress,
    print_batch_summary,
    print_error,
    print_header,
    print_performance,
    print_source_info,
    print_step,
    print_success,
)
from svgs2fonts.config import FONT_FORMATS, BuildSettings, create_settings
from svgs2fonts.core import BatchScheduler, DirectoryPipeline, LoggingObserver
from svgs2fonts.domain import AssemblyResult, IconSource, ProgressInfo
from svgs2fonts.exceptions import ConfigurationError, StageError
from svgs2fonts.io import list_icon_sources
from svgs2fonts.utils import PerformanceTracker, configure_logging

# Create the Typer app
app = typer.Typer(
    name="svgs2fonts",
    help="Build icon webfonts (SVG, TTF, EOT, WOFF, WOFF2) from directories of SVG icons.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]svgs2fonts[/bold blue] v{__version__}")
        raise typer.Exit()


def parse_code_point(value: str) -> int:
    """Parse a decimal or ``0x``-prefixed hexadecimal code point."""
    text = value.strip().lower()
    if text.startswith(("0x", "u+")):
        return int(text[2:], 16)
    return int(text, 10)


class ProgressObserver(LoggingObserver):
    """Assembly observer that also advances a Rich progress bar."""

    def __init__(self, progress: Progress, task_id: TaskID, font_name: str) -> None:
        super().__init__(font_name)
        self._progress = progress
        self._task_id = task_id

    def on_progress(self, current: int, total: int, current_file: str) -> None:
        super().on_progress(current, total, current_file)
        self._progress.update(self._task_id, completed=current, total=total)

    def on_complete(self, result: AssemblyResult) -> None:
        super().on_complete(result)
        self._progress.update(self._task_id, completed=result.total_count)


@app.command()
def svgs2fonts(
    src: Annotated[
        Path,
        typer.Argument(
            help="Directory containing SVG icons",
            show_default=False,
        ),
    ],
    dist: Annotated[
        Path | None,
        typer.Argument(
            help="Output directory (default: SRC)",
            show_default=False,
        ),
    ] = None,
    name: Annotated[
        str,
        typer.Option(
            "--name",
            "-n",
            help="Font name (family name and output file name)",
        ),
    ] = "iconfont",
    unicode_start: Annotated[
        str,
        typer.Option(
            "--unicode-start",
            help="First code point of the assignment range (decimal or 0x hex)",
        ),
    ] = "10000",
    no_demo: Annotated[
        bool,
        typer.Option(
            "--no-demo",
            help="Skip demo HTML/CSS generation",
        ),
    ] = False,
    formats: Annotated[
        str | None,
        typer.Option(
            "--formats",
            help=f"Comma-separated font formats (default: {','.join(FONT_FORMATS)})",
        ),
    ] = None,
    batch: Annotated[
        bool,
        typer.Option(
            "--batch",
            help="Build one font per input directory",
        ),
    ] = False,
    input_dir: Annotated[
        list[Path] | None,
        typer.Option(
            "--input-dir",
            help="Batch input directory (repeatable; default: subdirectories of SRC)",
        ),
    ] = None,
    batch_size: Annotated[
        int,
        typer.Option(
            "--batch-size",
            help="Directories processed concurrently in batch mode",
            min=1,
        ),
    ] = 3,
    continue_on_error: Annotated[
        bool,
        typer.Option(
            "--continue-on-error/--fail-fast",
            help="Keep going when a batch directory fails",
        ),
    ] = True,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    performance: Annotated[
        bool,
        typer.Option(
            "--performance",
            help="Report phase timings",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Build an icon webfont from a directory of SVG icons.

    Every icon gets a stable code point derived from its file name. The SVG
    font, the requested binary formats and two demo pages are written to DIST.

    Example:
        svgs2fonts icons/ dist/ --name my-icons
    """
    print_header(__version__)

    try:
        start = parse_code_point(unicode_start)
    except ValueError:
        print_error(
            f"Invalid unicode start: {unicode_start}",
            details="Use a decimal number or a 0x-prefixed hexadecimal value.",
        )
        raise typer.Exit(code=1)

    if batch and not input_dir and src.is_dir():
        input_dir = sorted(child for child in src.iterdir() if child.is_dir())

    configure_logging(
        log_file=log_file,
        console_level="INFO" if verbose else "WARNING",
        quiet=False,
    )

    options: dict[str, object] = {
        "src": src,
        "dist": dist if dist is not None else src,
        "font_name": name,
        "unicode_start": start,
        "no_demo": no_demo,
        "batch_mode": batch,
        "input_directories": input_dir or None,
        "batch_size": batch_size,
        "continue_on_error": continue_on_error,
        "verbose": verbose,
        "performance_analysis": performance,
        "logging": {"log_file": log_file},
    }
    if formats is not None:
        options["font_formats"] = formats

    try:
        settings = create_settings(**options)
    except ConfigurationError as e:
        print_error(str(e), details=f"Option: {e.field}" if verbose and e.field else None)
        raise typer.Exit(code=1)

    tracker = PerformanceTracker() if performance else None
    started = time.perf_counter()

    if settings.batch_mode:
        result = _run_batch(settings, tracker)
    else:
        result = _run_single(settings, tracker)

    if result is not True:
        _report_failure(result, verbose)
        raise typer.Exit(code=1)

    if tracker is not None:
        tracker.finish()
        print_performance(tracker.summary())

    if verbose:
        console.print(f"\n  Finished in {time.perf_counter() - started:.2f}s")


def _run_single(settings: BuildSettings, tracker: PerformanceTracker | None) -> bool | Exception:
    try:
        sources: list[IconSource] = list_icon_sources(settings.src)
    except OSError as e:
        return e

    print_step("Reading icons")
    print_source_info(str(settings.src), len(sources), settings.font_formats)

    print_step("Building font")
    started = time.perf_counter()
    with create_progress() as progress:
        task_id = progress.add_task(f"Processing {len(sources)} icons", total=len(sources))
        observer = ProgressObserver(progress, task_id, settings.font_name)
        pipeline = DirectoryPipeline(settings, tracker, observer)
        result = asyncio.run(pipeline.process())

    if result is True and pipeline.assembly is not None:
        print_success(
            dist=str(settings.dist),
            total_time_s=time.perf_counter() - started,
            processed=pipeline.assembly.processed_count,
            skipped=pipeline.assembly.skipped_count,
            formats=pipeline.formats,
        )
    return result


def _run_batch(settings: BuildSettings, tracker: PerformanceTracker | None) -> bool | Exception:
    directories = settings.input_directories or []
    print_step(f"Building {len(directories)} directories")
    started = time.perf_counter()

    with create_progress() as progress:
        task_id = progress.add_task("Batch", total=len(directories))

        def update_progress(info: ProgressInfo) -> None:
            progress.update(task_id, completed=info.completed, total=info.total)

        batch_settings = settings.model_copy(update={"progress_callback": update_progress})
        scheduler = BatchScheduler(batch_settings, tracker)
        result = asyncio.run(scheduler.process())

    print_batch_summary(scheduler.summary(), time.perf_counter() - started, settings.verbose)
    return result


def _report_failure(error: Exception, verbose: bool) -> None:
    if isinstance(error, StageError):
        if verbose:
            cause = error.cause
            details = f"{type(cause).__name__}: {cause}" if isinstance(cause, Exception) else None
            print_error(str(error), details=details)
        else:
            print_error(error.stage)
        return
    print_error(str(error), details=type(error).__name__ if verbose else None)


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
