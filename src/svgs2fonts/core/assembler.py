"""Streaming assembly of the intermediate SVG font.

The assembler pipes a producer (an async generator of SVG font text)
into a file sink. Icons are read and parsed one at a time in worker
threads and assigned code points as they stream, so glyph records are
never collected in memory.

Key components:
- AssemblyObserver: Protocol for progress, per-icon error and completion events
- LoggingObserver: Default observer writing structured log events
- GlyphStreamAssembler: Runs one assembly under a build-wide timeout
"""

import asyncio
import contextlib
from collections.abc import AsyncIterator
from typing import Protocol

import structlog

from svgs2fonts.config import BuildSettings
from svgs2fonts.core.codepoints import CodePointContext
from svgs2fonts.domain import AssemblyResult, AssemblyState, GlyphRecord, IconSource
from svgs2fonts.exceptions import (
    AssemblyError,
    AssemblyTimeoutError,
    CodePointRangeExhaustedError,
    IconReadError,
)
from svgs2fonts.io.reader import list_icon_sources, read_icon_outline
from svgs2fonts.io.writer import FontFileSink, glyph_element, svg_font_footer, svg_font_header

logger = structlog.get_logger(__name__)


class AssemblyObserver(Protocol):
    """Receives assembly events. Exceptions raised here are logged and ignored."""

    def on_progress(self, current: int, total: int, current_file: str) -> None: ...

    def on_error(self, source: IconSource, error: Exception) -> None: ...

    def on_complete(self, result: AssemblyResult) -> None: ...


class LoggingObserver:
    """Observer that reports assembly events through structlog."""

    def __init__(self, font_name: str = "") -> None:
        self._logger = logger.bind(font=font_name) if font_name else logger

    def on_progress(self, current: int, total: int, current_file: str) -> None:
        self._logger.info("Processing icon", current=current, total=total, file=current_file)

    def on_error(self, source: IconSource, error: Exception) -> None:
        self._logger.warning("Icon skipped", icon=source.name, error=str(error))

    def on_complete(self, result: AssemblyResult) -> None:
        if result.success:
            self._logger.info(
                "SVG font assembled",
                processed=result.processed_count,
                total=result.total_count,
            )
        else:
            self._logger.error(
                "SVG font assembly failed",
                state=result.state.name,
                error=str(result.error),
            )


class GlyphStreamAssembler:
    """Streams every icon of a directory into one SVG font file.

    Each instance runs a single assembly:
    IDLE -> STREAMING -> FINISHED | FAILED | TIMED_OUT.

    Example:
        context = CodePointContext(settings.unicode_start, settings.unicode_max)
        assembler = GlyphStreamAssembler(settings, context)
        result = await assembler.assemble()
    """

    def __init__(
        self,
        settings: BuildSettings,
        context: CodePointContext,
        observer: AssemblyObserver | None = None,
    ) -> None:
        self._settings = settings
        self._context = context
        self._observer: AssemblyObserver = observer or LoggingObserver(settings.font_name)
        self._state = AssemblyState.IDLE
        self._written = 0

    @property
    def state(self) -> AssemblyState:
        return self._state

    async def assemble(self, sources: list[IconSource] | None = None) -> AssemblyResult:
        """Write the SVG font for ``sources`` (default: the icons in ``src``).

        Failures are reported in the returned result, not raised.
        """
        if self._state is not AssemblyState.IDLE:
            raise AssemblyError(f"Assembler already used (state: {self._state.name})")

        if sources is None:
            try:
                sources = await asyncio.to_thread(list_icon_sources, self._settings.src)
            except OSError as e:
                return self._finish(AssemblyState.FAILED, 0, e)

        total = len(sources)
        capacity = self._context.capacity
        if total > capacity:
            error = CodePointRangeExhaustedError(
                self._settings.unicode_start,
                self._settings.unicode_max,
                capacity,
                requested=total,
            )
            return self._finish(AssemblyState.FAILED, total, error)

        self._state = AssemblyState.STREAMING
        sink = FontFileSink(self._settings.svg_font_path)
        logger.debug("Assembly started", destination=str(sink.path), icons=total)

        try:
            await asyncio.wait_for(
                self._stream(sources, sink),
                timeout=self._settings.timeout_seconds,
            )
        except asyncio.TimeoutError:
            await sink.discard()
            return self._finish(
                AssemblyState.TIMED_OUT,
                total,
                AssemblyTimeoutError(self._settings.timeout_seconds),
            )
        except Exception as e:
            await sink.discard()
            return self._finish(AssemblyState.FAILED, total, e)

        return self._finish(AssemblyState.FINISHED, total)

    async def _stream(self, sources: list[IconSource], sink: FontFileSink) -> None:
        async with contextlib.AsyncExitStack() as stack:
            await sink.open()
            stack.push_async_callback(sink.close)

            producer = self._produce(sources)
            stack.push_async_callback(producer.aclose)

            async for chunk in producer:
                await sink.write(chunk)

    async def _produce(self, sources: list[IconSource]) -> AsyncIterator[str]:
        settings = self._settings
        total = len(sources)

        yield svg_font_header(settings.font_name, settings.font_height, settings.descent)

        for index, source in enumerate(sources):
            if index % settings.progress_interval == 0:
                self._notify_progress(index + 1, total, source.path.name)

            if source.name in self._context:
                self._notify_error(source, IconReadError(source.path, "duplicate icon name"))
                continue

            try:
                outline = await asyncio.to_thread(
                    read_icon_outline,
                    source,
                    settings.font_height,
                    settings.descent,
                    settings.center_horizontally,
                )
            except IconReadError as e:
                self._notify_error(source, e)
                continue

            codepoint = self._context.assign(source.name)
            if codepoint is None:
                self._notify_error(source, IconReadError(source.path, "empty icon name"))
                continue

            record = GlyphRecord(
                name=source.name,
                codepoint=codepoint,
                source_path=source.path,
                path_data=outline.path_data,
                advance_width=outline.advance_width,
            )
            self._written += 1
            yield glyph_element(record)

        yield svg_font_footer()

    def _finish(
        self,
        state: AssemblyState,
        total: int,
        error: Exception | None = None,
    ) -> AssemblyResult:
        self._state = state
        if error is None:
            result = AssemblyResult(
                success=True,
                processed_count=self._written,
                total_count=total,
                assignment=self._context.freeze(),
                state=state,
            )
        else:
            result = AssemblyResult(
                success=False,
                processed_count=0,
                total_count=total,
                state=state,
                error=error,
            )
        self._notify_complete(result)
        return result

    def _notify_progress(self, current: int, total: int, current_file: str) -> None:
        try:
            self._observer.on_progress(current, total, current_file)
        except Exception:
            logger.warning("Progress observer failed", exc_info=True)

    def _notify_error(self, source: IconSource, error: Exception) -> None:
        try:
            self._observer.on_error(source, error)
        except Exception:
            logger.warning("Error observer failed", icon=source.name, exc_info=True)

    def _notify_complete(self, result: AssemblyResult) -> None:
        try:
            self._observer.on_complete(result)
        except Exception:
            logger.warning("Completion observer failed", exc_info=True)
