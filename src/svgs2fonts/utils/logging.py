"""Logging utilities for svgs2fonts."""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

import structlog


@dataclass
class PhaseTiming:
    """Timing of one named build phase."""

    name: str
    start_time: float
    end_time: float | None = None

    @property
    def duration_ms(self) -> float:
        """Phase duration in milliseconds (0 while the phase is open)."""
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time) * 1000


@dataclass
class PerformanceTracker:
    """Records phase timings for a build and renders a summary."""

    phases: list[PhaseTiming] = field(default_factory=list)
    start_time: float = field(default_factory=time.perf_counter)
    end_time: float | None = None

    def start_phase(self, name: str) -> None:
        """Open a phase, closing any phase still open under the same name."""
        self.end_phase(name)
        self.phases.append(PhaseTiming(name=name, start_time=time.perf_counter()))

    def end_phase(self, name: str) -> None:
        """Close the most recent open phase with this name."""
        for phase in reversed(self.phases):
            if phase.name == name and phase.end_time is None:
                phase.end_time = time.perf_counter()
                return

    def finish(self) -> None:
        """Close all open phases and stop the overall clock."""
        now = time.perf_counter()
        for phase in self.phases:
            if phase.end_time is None:
                phase.end_time = now
        self.end_time = now

    @property
    def total_ms(self) -> float:
        """Elapsed time since the tracker was created, in milliseconds."""
        end = self.end_time if self.end_time is not None else time.perf_counter()
        return (end - self.start_time) * 1000

    def summary(self) -> str:
        """Render "Total time" followed by one line per phase with its share."""
        total = self.total_ms
        lines = [f"Total time: {total:.0f}ms", "Phases:"]
        for phase in self.phases:
            share = (phase.duration_ms / total * 100) if total > 0 else 0.0
            lines.append(f"  {phase.name}: {phase.duration_ms:.0f}ms ({share:.1f}%)")
        return "\n".join(lines)


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (no file handler if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("svgs2fonts")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger
