"""Tests for streaming SVG font assembly."""

import time
from unittest.mock import MagicMock, patch

import pytest

from svgs2fonts.config import create_settings
from svgs2fonts.core.assembler import GlyphStreamAssembler, LoggingObserver
from svgs2fonts.core.codepoints import CodePointContext
from svgs2fonts.domain import AssemblyState
from svgs2fonts.exceptions import (
    AssemblyError,
    AssemblyTimeoutError,
    CodePointRangeExhaustedError,
    IconReadError,
)
from svgs2fonts.io.converter import parse_svg_font


def make_assembler(settings, observer=None):
    context = CodePointContext(settings.unicode_start, settings.unicode_max)
    return GlyphStreamAssembler(settings, context, observer), context


class TestGlyphStreamAssembler:
    """Tests for GlyphStreamAssembler."""

    @pytest.mark.asyncio
    async def test_assembles_every_icon(self, icon_dir, dist_dir):
        settings = create_settings(src=icon_dir, dist=dist_dir, font_name="icons")
        assembler, _ = make_assembler(settings)

        result = await assembler.assemble()

        assert result.success
        assert result.state is AssemblyState.FINISHED
        assert assembler.state is AssemblyState.FINISHED
        assert result.processed_count == 3
        assert result.total_count == 3
        assert list(result.assignment) == ["a", "b", "c"]

        svg_font = parse_svg_font(settings.svg_font_path.read_text())
        assert {glyph.name: glyph.codepoint for glyph in svg_font.glyphs} == dict(
            result.assignment
        )

    @pytest.mark.asyncio
    async def test_assignment_is_read_only(self, icon_dir, dist_dir):
        settings = create_settings(src=icon_dir, dist=dist_dir, font_name="icons")
        assembler, _ = make_assembler(settings)

        result = await assembler.assemble()

        with pytest.raises(TypeError):
            result.assignment["d"] = 1  # type: ignore[index]

    @pytest.mark.asyncio
    async def test_code_points_start_at_configured_range(self, icon_dir, dist_dir):
        settings = create_settings(
            src=icon_dir, dist=dist_dir, font_name="icons", unicode_start=0xE000
        )
        assembler, _ = make_assembler(settings)

        result = await assembler.assemble()

        codepoints = list(result.assignment.values())
        assert len(set(codepoints)) == 3
        assert all(codepoint >= 0xE000 for codepoint in codepoints)

    @pytest.mark.asyncio
    async def test_unreadable_icon_is_skipped(self, icon_dir, dist_dir, write_icon):
        write_icon(icon_dir, "broken", "not an svg at all")
        settings = create_settings(src=icon_dir, dist=dist_dir, font_name="icons")
        observer = MagicMock()
        assembler, _ = make_assembler(settings, observer)

        result = await assembler.assemble()

        assert result.success
        assert result.processed_count == 3
        assert result.total_count == 4
        assert result.skipped_count == 1
        assert "broken" not in result.assignment
        observer.on_error.assert_called_once()
        source, error = observer.on_error.call_args.args
        assert source.name == "broken"
        assert isinstance(error, IconReadError)

    @pytest.mark.asyncio
    async def test_progress_reported_every_interval(self, tmp_path, dist_dir, write_icon):
        icons = tmp_path / "many"
        for i in range(25):
            write_icon(icons, f"icon{i:02d}")
        settings = create_settings(src=icons, dist=dist_dir, font_name="icons")
        observer = MagicMock()
        assembler, _ = make_assembler(settings, observer)

        await assembler.assemble()

        calls = [call.args for call in observer.on_progress.call_args_list]
        assert calls == [
            (1, 25, "icon00.svg"),
            (11, 25, "icon10.svg"),
            (21, 25, "icon20.svg"),
        ]
        observer.on_complete.assert_called_once()

    @pytest.mark.asyncio
    async def test_observer_errors_are_swallowed(self, icon_dir, dist_dir):
        settings = create_settings(src=icon_dir, dist=dist_dir, font_name="icons")
        observer = MagicMock()
        observer.on_progress.side_effect = RuntimeError("observer broke")
        observer.on_complete.side_effect = RuntimeError("observer broke")
        assembler, _ = make_assembler(settings, observer)

        result = await assembler.assemble()

        assert result.success

    @pytest.mark.asyncio
    async def test_range_exhaustion_writes_nothing(self, icon_dir, dist_dir):
        settings = create_settings(
            src=icon_dir,
            dist=dist_dir,
            font_name="icons",
            unicode_start=0xE000,
            unicode_max=0xE002,
        )
        assembler, _ = make_assembler(settings)

        result = await assembler.assemble()

        assert not result.success
        assert result.state is AssemblyState.FAILED
        assert result.processed_count == 0
        assert isinstance(result.error, CodePointRangeExhaustedError)
        assert "3 icons requested" in str(result.error)
        assert not settings.svg_font_path.exists()

    @pytest.mark.asyncio
    async def test_timeout_releases_destination(self, icon_dir, dist_dir):
        settings = create_settings(
            src=icon_dir, dist=dist_dir, font_name="icons", timeout_seconds=0.05
        )
        assembler, context = make_assembler(settings)

        def slow_read(*args, **kwargs):
            time.sleep(0.3)
            raise IconReadError("slow.svg", "too slow")

        with patch("svgs2fonts.core.assembler.read_icon_outline", side_effect=slow_read):
            result = await assembler.assemble()

        assert not result.success
        assert result.state is AssemblyState.TIMED_OUT
        assert isinstance(result.error, AssemblyTimeoutError)
        assert str(result.error) == "Font creation timeout after 0.05s"
        assert not settings.svg_font_path.exists()

    @pytest.mark.asyncio
    async def test_failure_removes_partial_file(self, icon_dir, dist_dir):
        settings = create_settings(src=icon_dir, dist=dist_dir, font_name="icons")
        assembler, _ = make_assembler(settings)

        with patch(
            "svgs2fonts.core.assembler.glyph_element",
            side_effect=["<glyph/>", RuntimeError("disk full")],
        ):
            result = await assembler.assemble()

        assert not result.success
        assert result.state is AssemblyState.FAILED
        assert str(result.error) == "disk full"
        assert not settings.svg_font_path.exists()

    @pytest.mark.asyncio
    async def test_missing_source_directory(self, icon_dir, dist_dir):
        settings = create_settings(src=icon_dir, dist=dist_dir, font_name="icons")
        for path in icon_dir.iterdir():
            path.unlink()
        icon_dir.rmdir()
        assembler, _ = make_assembler(settings)

        result = await assembler.assemble()

        assert not result.success
        assert isinstance(result.error, FileNotFoundError)

    @pytest.mark.asyncio
    async def test_explicit_sources(self, icon_dir, dist_dir):
        from svgs2fonts.io import list_icon_sources

        settings = create_settings(src=icon_dir, dist=dist_dir, font_name="icons")
        assembler, _ = make_assembler(settings)

        result = await assembler.assemble(list_icon_sources(icon_dir)[:1])

        assert list(result.assignment) == ["a"]

    @pytest.mark.asyncio
    async def test_assembler_runs_once(self, icon_dir, dist_dir):
        settings = create_settings(src=icon_dir, dist=dist_dir, font_name="icons")
        assembler, _ = make_assembler(settings)
        await assembler.assemble()

        with pytest.raises(AssemblyError, match="already used"):
            await assembler.assemble()


class TestLoggingObserver:
    """Tests for the default observer."""

    def test_logs_without_raising(self, tmp_path):
        from svgs2fonts.domain import AssemblyResult, IconSource

        observer = LoggingObserver("icons")
        source = IconSource(name="a", path=tmp_path / "a.svg")

        observer.on_progress(1, 3, "a.svg")
        observer.on_error(source, IconReadError(source.path, "bad"))
        observer.on_complete(AssemblyResult(success=True, processed_count=3, total_count=3))
