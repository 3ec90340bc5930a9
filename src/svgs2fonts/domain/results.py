"""Result types returned by the build stages.

Stages and pipelines never raise past their boundary; they hand back
these values (or ``True | Exception``) instead.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from types import MappingProxyType


class AssemblyState(Enum):
    """Lifecycle of one glyph assembly run."""

    IDLE = auto()
    STREAMING = auto()
    FINISHED = auto()
    FAILED = auto()
    TIMED_OUT = auto()


class PipelineState(Enum):
    """Lifecycle of one directory pipeline."""

    CREATED = auto()
    SVG_STAGE = auto()
    FONT_STAGE = auto()
    DEMO_STAGE = auto()
    DONE = auto()
    FAILED = auto()


EMPTY_ASSIGNMENT: Mapping[str, int] = MappingProxyType({})


@dataclass(frozen=True)
class AssemblyResult:
    """Outcome of assembling the intermediate SVG font.

    Attributes:
        success: Whether the artifact was fully written
        processed_count: Glyphs written (0 on failure)
        total_count: Icons discovered
        assignment: Read-only icon name to code point mapping
        state: Terminal assembly state
        error: Failure cause, if any
    """

    success: bool
    processed_count: int
    total_count: int
    assignment: Mapping[str, int] = field(default_factory=lambda: EMPTY_ASSIGNMENT)
    state: AssemblyState = AssemblyState.FINISHED
    error: Exception | None = None

    @property
    def skipped_count(self) -> int:
        """Icons that could not be read or parsed."""
        if not self.success:
            return 0
        return self.total_count - self.processed_count


@dataclass(frozen=True)
class FontFormatResult:
    """Outcome of generating one font format."""

    format: str
    success: bool
    output_path: Path | None = None
    file_size: int | None = None
    duration_ms: float = 0.0
    error: Exception | None = None


@dataclass(frozen=True)
class FormatBatchResult:
    """Outcome of generating several font formats concurrently."""

    successful: list[FontFormatResult] = field(default_factory=list)
    failed: list[FontFormatResult] = field(default_factory=list)
    total_duration_ms: float = 0.0
    compression_ratio: int | None = None

    @property
    def success(self) -> bool:
        return not self.failed


@dataclass(frozen=True)
class ProgressInfo:
    """Progress update handed to progress callbacks."""

    phase: str
    completed: int
    total: int
    current: str | None = None

    @property
    def percent(self) -> float:
        if self.total <= 0:
            return 100.0
        return self.completed / self.total * 100


@dataclass(frozen=True)
class BatchSummary:
    """Aggregate view of a batch run.

    Attributes:
        total: Directories scheduled
        successful: Directories that built successfully
        failed: Directories that failed
        results: Per-directory results in input order
    """

    total: int
    successful: int
    failed: int
    results: tuple["bool | Exception", ...] = ()

    @property
    def errors(self) -> list[Exception]:
        return [result for result in self.results if isinstance(result, Exception)]
