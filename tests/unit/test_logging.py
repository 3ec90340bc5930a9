"""Tests for logging utilities."""

import logging
import time

import pytest
import structlog

from svgs2fonts.utils import PerformanceTracker, configure_logging


@pytest.fixture
def clean_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers[:]:
        if handler not in handlers:
            handler.close()
            root.removeHandler(handler)
    root.setLevel(level)
    structlog.reset_defaults()


class TestPerformanceTracker:
    """Tests for PerformanceTracker."""

    def test_phases_are_timed(self):
        tracker = PerformanceTracker()
        tracker.start_phase("SVG Processing")
        time.sleep(0.01)
        tracker.end_phase("SVG Processing")

        assert len(tracker.phases) == 1
        assert tracker.phases[0].duration_ms >= 10

    def test_open_phase_has_no_duration(self):
        tracker = PerformanceTracker()
        tracker.start_phase("Font Generation")

        assert tracker.phases[0].duration_ms == 0.0

    def test_finish_closes_open_phases(self):
        tracker = PerformanceTracker()
        tracker.start_phase("Font Generation")
        tracker.finish()

        assert tracker.phases[0].end_time is not None
        assert tracker.end_time is not None
        total = tracker.total_ms
        time.sleep(0.01)
        assert tracker.total_ms == total

    def test_restarting_a_phase_closes_the_previous_one(self):
        tracker = PerformanceTracker()
        tracker.start_phase("Batch Processing")
        tracker.start_phase("Batch Processing")

        assert len(tracker.phases) == 2
        assert tracker.phases[0].end_time is not None

    def test_summary(self):
        tracker = PerformanceTracker()
        tracker.start_phase("SVG Processing")
        tracker.end_phase("SVG Processing")
        tracker.finish()

        lines = tracker.summary().splitlines()
        assert lines[0].startswith("Total time: ")
        assert lines[1] == "Phases:"
        assert lines[2].startswith("  SVG Processing: ")
        assert lines[2].endswith("%)")


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_console_only(self, clean_root_logger):
        before = len(clean_root_logger.handlers)

        configure_logging(console_level="INFO")

        added = clean_root_logger.handlers[before:]
        assert len(added) == 1
        assert added[0].level == logging.INFO

    def test_file_handler(self, clean_root_logger, tmp_path):
        log_file = tmp_path / "logs" / "build.log"

        configure_logging(log_file=log_file, quiet=True)

        assert log_file.exists()
        file_handlers = [
            handler
            for handler in clean_root_logger.handlers
            if isinstance(handler, logging.FileHandler)
        ]
        assert file_handlers[-1].level == logging.DEBUG

    def test_quiet_without_file_adds_nothing(self, clean_root_logger):
        before = len(clean_root_logger.handlers)

        configure_logging(quiet=True)

        assert len(clean_root_logger.handlers) == before
