"""Single-directory build pipeline.

Runs the stages for one source directory in strict order:
SVG font assembly, font format generation, then (optionally) the demo.
"""

import asyncio

import structlog

from svgs2fonts.config import BuildSettings
from svgs2fonts.core.assembler import AssemblyObserver, GlyphStreamAssembler
from svgs2fonts.core.codepoints import CodePointContext
from svgs2fonts.core.demo import DemoBuilder
from svgs2fonts.core.formats import FormatConverter
from svgs2fonts.domain import AssemblyResult, FormatBatchResult, PipelineState
from svgs2fonts.exceptions import StageError
from svgs2fonts.utils import PerformanceTracker

logger = structlog.get_logger(__name__)

PHASE_SVG = "SVG Processing"
PHASE_FONT = "Font Generation"
PHASE_DEMO = "Demo Generation"


class DirectoryPipeline:
    """Builds the font bundle for one source directory.

    Code point state and converter caches belong to this pipeline only
    and are cleared before ``process`` returns. Pipelines sharing one
    tracker use ``phase_prefix`` to keep their phase timings apart.

    Example:
        pipeline = DirectoryPipeline(settings)
        result = await pipeline.process()
        if result is not True:
            print(result)
    """

    def __init__(
        self,
        settings: BuildSettings,
        tracker: PerformanceTracker | None = None,
        observer: AssemblyObserver | None = None,
        phase_prefix: str = "",
    ) -> None:
        self._settings = settings
        self._tracker = tracker
        self._phase_prefix = phase_prefix
        self._observer = observer
        self._state = PipelineState.CREATED
        self._assembly: AssemblyResult | None = None
        self._formats: FormatBatchResult | None = None
        self._logger = logger.bind(directory=str(settings.src), font=settings.font_name)

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def assembly(self) -> AssemblyResult | None:
        """Result of the SVG stage, once it ran."""
        return self._assembly

    @property
    def formats(self) -> FormatBatchResult | None:
        """Result of the font stage, once it ran."""
        return self._formats

    async def process(self) -> bool | Exception:
        """Run every stage.

        Returns:
            True on success, otherwise the exception describing the failure
        """
        context = CodePointContext(self._settings.unicode_start, self._settings.unicode_max)
        converter = FormatConverter(self._settings)

        try:
            assembly = await self._svg_stage(context)
            await self._font_stage(converter)
            if not self._settings.no_demo:
                await self._demo_stage(assembly)
        except Exception as e:
            self._state = PipelineState.FAILED
            self._logger.error("Build failed", error=str(e), error_type=type(e).__name__)
            return e
        finally:
            converter.cleanup()
            context.clear()

        self._state = PipelineState.DONE
        self._logger.info("Build complete", icons=assembly.processed_count)
        return True

    async def _svg_stage(self, context: CodePointContext) -> AssemblyResult:
        self._state = PipelineState.SVG_STAGE
        self._start_phase(PHASE_SVG)

        assembler = GlyphStreamAssembler(self._settings, context, self._observer)
        assembly = await assembler.assemble()
        self._assembly = assembly
        if not assembly.success:
            raise StageError(StageError.SVG, assembly.error)

        self._end_phase(PHASE_SVG)
        return assembly

    async def _font_stage(self, converter: FormatConverter) -> None:
        self._state = PipelineState.FONT_STAGE
        self._start_phase(PHASE_FONT)

        try:
            formats = await converter.generate_batch(self._settings.font_formats)
        except Exception as e:
            raise StageError(StageError.FONT, e) from e
        self._formats = formats

        if formats.failed:
            causes = "; ".join(f"{result.format}: {result.error}" for result in formats.failed)
            raise StageError(StageError.FONT, causes)

        if formats.compression_ratio is not None:
            self._logger.info("WOFF2 compression", saved_percent=formats.compression_ratio)
        self._end_phase(PHASE_FONT)

    async def _demo_stage(self, assembly: AssemblyResult) -> None:
        self._state = PipelineState.DEMO_STAGE
        self._start_phase(PHASE_DEMO)

        builder = DemoBuilder(self._settings, assembly.assignment)
        try:
            await asyncio.to_thread(builder.write)
        except Exception as e:
            raise StageError(StageError.DEMO, e) from e

        self._end_phase(PHASE_DEMO)

    def _start_phase(self, name: str) -> None:
        if self._tracker is not None:
            self._tracker.start_phase(self._phase_prefix + name)

    def _end_phase(self, name: str) -> None:
        if self._tracker is not None:
            self._tracker.end_phase(self._phase_prefix + name)
