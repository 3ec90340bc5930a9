"""Batch scheduling of directory pipelines.

Directories are processed in chunks of ``batch_size``: pipelines within a
chunk run concurrently and each chunk settles before the next starts.
"""

import asyncio
from collections.abc import Callable
from pathlib import Path

import structlog

from svgs2fonts.config import BuildSettings
from svgs2fonts.core.pipeline import DirectoryPipeline
from svgs2fonts.domain import BatchSummary, ProgressInfo
from svgs2fonts.exceptions import BatchError, ConfigurationError
from svgs2fonts.utils import PerformanceTracker

logger = structlog.get_logger(__name__)

PHASE_BATCH = "Batch Processing"

PipelineFactory = Callable[..., DirectoryPipeline]


def derive_output_dir(dist: Path, directory: Path, pattern: str, font_name: str) -> Path:
    """Output directory of one batch unit.

    Args:
        dist: Batch output root
        directory: Source directory of the unit
        pattern: Sub-path pattern with ``{basename}`` and ``{font_name}`` placeholders
        font_name: Configured font name

    Raises:
        ConfigurationError: If the pattern uses an unknown placeholder
    """
    try:
        relative = pattern.format(basename=directory.name, font_name=font_name)
    except (KeyError, IndexError, ValueError) as e:
        raise ConfigurationError(f"Invalid output pattern {pattern!r}: {e}", "output_pattern") from e
    return dist / relative


def chunked(items: list[Path], size: int) -> list[list[Path]]:
    return [items[i : i + size] for i in range(0, len(items), size)]


class BatchScheduler:
    """Runs one DirectoryPipeline per input directory.

    Example:
        scheduler = BatchScheduler(settings)
        result = await scheduler.process()
        print(scheduler.summary())
    """

    def __init__(
        self,
        settings: BuildSettings,
        tracker: PerformanceTracker | None = None,
        pipeline_factory: PipelineFactory | None = None,
    ) -> None:
        self._settings = settings
        self._tracker = tracker
        self._pipeline_factory = pipeline_factory or DirectoryPipeline
        self._results: list[bool | Exception] = []

    @property
    def results(self) -> tuple[bool | Exception, ...]:
        """Per-directory results in input order."""
        return tuple(self._results)

    def summary(self) -> BatchSummary:
        failed = sum(1 for result in self._results if isinstance(result, Exception))
        return BatchSummary(
            total=len(self._results),
            successful=len(self._results) - failed,
            failed=failed,
            results=self.results,
        )

    async def process(self) -> bool | Exception:
        """Process every input directory.

        Returns:
            True when the batch completed (failures under continue-on-error
            included), otherwise the exception that stopped it
        """
        settings = self._settings
        directories = list(settings.input_directories or [])
        self._results = []

        if not directories:
            return ConfigurationError(
                "No input directories specified for batch processing",
                "input_directories",
            )

        if self._tracker is not None:
            self._tracker.start_phase(PHASE_BATCH)

        total = len(directories)
        for number, chunk in enumerate(chunked(directories, settings.batch_size), start=1):
            chunk_results = await asyncio.gather(*(self._run_unit(path) for path in chunk))
            self._results.extend(chunk_results)

            self._report_progress(
                ProgressInfo(
                    phase=PHASE_BATCH,
                    completed=min(len(self._results), total),
                    total=total,
                    current=f"Processed batch {number}",
                )
            )

            if not settings.continue_on_error and any(
                isinstance(result, Exception) for result in chunk_results
            ):
                logger.warning("Batch stopped after failures", chunk=number)
                break

        if self._tracker is not None:
            self._tracker.end_phase(PHASE_BATCH)

        summary = self.summary()
        logger.info(
            "Batch processing completed",
            successful=summary.successful,
            failed=summary.failed,
            scheduled=total,
        )

        if summary.failed and not settings.continue_on_error:
            return BatchError(summary.failed)
        return True

    async def _run_unit(self, directory: Path) -> bool | Exception:
        """Build one directory. Never raises."""
        try:
            dist = derive_output_dir(
                self._settings.dist,
                directory,
                self._settings.output_pattern,
                self._settings.font_name,
            )
            unit_settings = self._settings.for_directory(directory, dist)
            pipeline = self._pipeline_factory(
                unit_settings,
                self._tracker,
                phase_prefix=f"{directory.name}: ",
            )
            result = await pipeline.process()
        except Exception as e:
            result = e

        if isinstance(result, Exception):
            logger.warning("Directory failed", directory=str(directory), error=str(result))
        return result

    def _report_progress(self, info: ProgressInfo) -> None:
        callback = self._settings.progress_callback
        if callback is None:
            return
        try:
            callback(info)
        except Exception:
            logger.warning("Progress callback failed", exc_info=True)
