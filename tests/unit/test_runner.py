"""Tests for the build entry points."""

from unittest.mock import MagicMock, patch

import pytest

from svgs2fonts.config import create_settings
from svgs2fonts.core.runner import build, run
from svgs2fonts.exceptions import ConfigurationError
from svgs2fonts.utils import PerformanceTracker


def _stub(result):
    instance = MagicMock()

    async def process():
        return result

    instance.process = process
    return MagicMock(return_value=instance)


class TestBuild:
    """Tests for build()."""

    @pytest.mark.asyncio
    async def test_configuration_error_is_returned(self, tmp_path):
        result = await build(src=tmp_path / "missing", dist=tmp_path / "dist", font_name="icons")

        assert isinstance(result, ConfigurationError)
        assert result.field == "src"

    @pytest.mark.asyncio
    async def test_single_mode_uses_directory_pipeline(self, icon_dir, dist_dir):
        pipeline = _stub(True)
        scheduler = _stub(True)

        with (
            patch("svgs2fonts.core.runner.DirectoryPipeline", pipeline),
            patch("svgs2fonts.core.runner.BatchScheduler", scheduler),
        ):
            result = await build(src=icon_dir, dist=dist_dir, font_name="icons")

        assert result is True
        pipeline.assert_called_once()
        scheduler.assert_not_called()

    @pytest.mark.asyncio
    async def test_batch_mode_uses_scheduler(self, icon_dir, dist_dir):
        pipeline = _stub(True)
        scheduler = _stub(True)

        with (
            patch("svgs2fonts.core.runner.DirectoryPipeline", pipeline),
            patch("svgs2fonts.core.runner.BatchScheduler", scheduler),
        ):
            result = await build(
                src=icon_dir,
                dist=dist_dir,
                fontName="icons",
                batchMode=True,
                inputDirectories=[icon_dir],
            )

        assert result is True
        scheduler.assert_called_once()
        pipeline.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_is_returned(self, icon_dir, dist_dir):
        error = RuntimeError("boom")

        with patch("svgs2fonts.core.runner.DirectoryPipeline", _stub(error)):
            result = await build(src=icon_dir, dist=dist_dir, font_name="icons")

        assert result is error

    @pytest.mark.asyncio
    async def test_tracker_created_for_performance_analysis(self, icon_dir, dist_dir):
        pipeline = _stub(True)

        with patch("svgs2fonts.core.runner.DirectoryPipeline", pipeline):
            await build(src=icon_dir, dist=dist_dir, font_name="icons", performance_analysis=True)

        tracker = pipeline.call_args.args[1]
        assert isinstance(tracker, PerformanceTracker)
        assert tracker.end_time is not None

    @pytest.mark.asyncio
    async def test_explicit_settings_and_tracker(self, icon_dir, dist_dir):
        settings = create_settings(src=icon_dir, dist=dist_dir, font_name="icons")
        tracker = PerformanceTracker()
        pipeline = _stub(True)

        with patch("svgs2fonts.core.runner.DirectoryPipeline", pipeline):
            await build(settings, tracker)

        assert pipeline.call_args.args[0] is settings
        assert pipeline.call_args.args[1] is tracker
        assert tracker.end_time is not None


class TestRun:
    """Tests for the blocking wrapper."""

    def test_run_builds_real_fonts(self, icon_dir, dist_dir):
        result = run(src=icon_dir, dist=dist_dir, fontName="icons", fontFormats="ttf,woff")

        assert result is True
        assert (dist_dir / "icons.ttf").exists()
        assert (dist_dir / "icons.woff").exists()
        assert not (dist_dir / "icons.eot").exists()
