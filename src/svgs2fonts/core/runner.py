"""Top-level build entry points."""

import asyncio
from typing import Any

import structlog

from svgs2fonts.config import BuildSettings, create_settings
from svgs2fonts.core.assembler import AssemblyObserver
from svgs2fonts.core.batch import BatchScheduler
from svgs2fonts.core.pipeline import DirectoryPipeline
from svgs2fonts.exceptions import ConfigurationError
from svgs2fonts.utils import PerformanceTracker

logger = structlog.get_logger(__name__)


async def build(
    settings: BuildSettings | None = None,
    tracker: PerformanceTracker | None = None,
    observer: AssemblyObserver | None = None,
    **options: Any,
) -> bool | Exception:
    """Build a font bundle in single or batch mode.

    Either pass validated ``settings`` or raw keyword options (snake_case
    or the legacy camelCase names). Every failure, configuration errors
    included, is returned rather than raised.

    Args:
        settings: Validated settings (takes precedence over ``options``)
        tracker: Performance tracker; created when ``performance_analysis``
            is set and none is given
        observer: Assembly observer for single-directory builds
        **options: Raw options for create_settings

    Returns:
        True on success, otherwise the exception describing the failure
    """
    if settings is None:
        try:
            settings = create_settings(**options)
        except ConfigurationError as e:
            logger.error("Invalid configuration", error=str(e), field=e.field)
            return e

    if tracker is None and settings.performance_analysis:
        tracker = PerformanceTracker()

    logger.info(
        "Build started",
        mode="batch" if settings.batch_mode else "single",
        src=str(settings.src),
        dist=str(settings.dist),
        formats=settings.font_formats,
    )

    if settings.batch_mode:
        result = await BatchScheduler(settings, tracker).process()
    else:
        result = await DirectoryPipeline(settings, tracker, observer).process()

    if tracker is not None:
        tracker.finish()
        if settings.performance_analysis:
            logger.info("Performance summary", summary=tracker.summary())

    return result


def run(settings: BuildSettings | None = None, **options: Any) -> bool | Exception:
    """Blocking wrapper around :func:`build` for callers without an event loop."""
    return asyncio.run(build(settings, **options))
