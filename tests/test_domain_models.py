"""Tests for domain models to verify they work correctly."""

import dataclasses
from pathlib import Path
from types import MappingProxyType

import pytest

from svgs2fonts.domain import (
    AssemblyResult,
    AssemblyState,
    BatchSummary,
    FontFormatResult,
    FormatBatchResult,
    GlyphRecord,
    IconOutline,
    IconSource,
    ProgressInfo,
)


class TestIconSource:
    """Tests for IconSource class."""

    def test_icon_source_creation(self) -> None:
        """Test basic icon source creation."""
        source = IconSource(name="home", path=Path("/icons/home.svg"))
        assert source.name == "home"
        assert source.path.suffix == ".svg"

    def test_icon_source_immutable(self) -> None:
        """Test that icon source is immutable."""
        source = IconSource(name="home", path=Path("/icons/home.svg"))
        with pytest.raises(dataclasses.FrozenInstanceError):
            source.name = "star"  # type: ignore


class TestGlyphRecord:
    """Tests for GlyphRecord class."""

    def _record(self) -> GlyphRecord:
        return GlyphRecord(
            name="home",
            codepoint=0xE001,
            source_path=Path("/icons/home.svg"),
            path_data="M0,0 L10,0 L10,10 Z",
            advance_width=1000,
        )

    def test_hex_codepoint(self) -> None:
        """Test lower-case hex rendering without prefix."""
        assert self._record().hex_codepoint == "e001"

    def test_to_dict(self) -> None:
        """Test serialization for logging omits path data."""
        data = self._record().to_dict()
        assert data == {
            "name": "home",
            "codepoint": 0xE001,
            "source": str(Path("/icons/home.svg")),
            "advance_width": 1000,
        }

    def test_outline_fields(self) -> None:
        """Test outline carries path data and advance."""
        outline = IconOutline(path_data="M0,0 Z", advance_width=500)
        assert outline.advance_width == 500


class TestAssemblyResult:
    """Tests for AssemblyResult class."""

    def test_skipped_count(self) -> None:
        """Test skipped icons are derived from the counts."""
        result = AssemblyResult(
            success=True,
            processed_count=8,
            total_count=10,
            assignment=MappingProxyType({"a": 1}),
        )
        assert result.skipped_count == 2
        assert result.state is AssemblyState.FINISHED

    def test_default_assignment_is_empty_and_read_only(self) -> None:
        """Test results built without an assignment get an empty read-only map."""
        result = AssemblyResult(success=True, processed_count=0, total_count=0)
        assert dict(result.assignment) == {}
        with pytest.raises(TypeError):
            result.assignment["a"] = 1  # type: ignore[index]

    def test_assignment_field_uses_factory(self) -> None:
        """Test the assignment default is built per instance, not a shared default value."""
        assignment_field = next(
            f for f in dataclasses.fields(AssemblyResult) if f.name == "assignment"
        )
        assert assignment_field.default is dataclasses.MISSING
        assert assignment_field.default_factory is not dataclasses.MISSING

    def test_failed_result_has_no_skips(self) -> None:
        """Test a failed assembly reports no skipped icons."""
        result = AssemblyResult(
            success=False,
            processed_count=0,
            total_count=10,
            state=AssemblyState.FAILED,
            error=RuntimeError("boom"),
        )
        assert result.skipped_count == 0
        assert len(result.assignment) == 0


class TestFormatBatchResult:
    """Tests for FormatBatchResult class."""

    def test_success_without_failures(self) -> None:
        """Test a batch with no failures is successful."""
        batch = FormatBatchResult(successful=[FontFormatResult(format="ttf", success=True)])
        assert batch.success

    def test_failure(self) -> None:
        """Test a batch with a failed format is not successful."""
        batch = FormatBatchResult(
            failed=[FontFormatResult(format="woff2", success=False, error=ValueError("x"))]
        )
        assert not batch.success


class TestProgressInfo:
    """Tests for ProgressInfo class."""

    def test_percent(self) -> None:
        """Test completion percentage."""
        assert ProgressInfo(phase="Batch", completed=1, total=4).percent == 25.0

    def test_percent_with_no_work(self) -> None:
        """Test an empty run counts as complete."""
        assert ProgressInfo(phase="Batch", completed=0, total=0).percent == 100.0


class TestBatchSummary:
    """Tests for BatchSummary class."""

    def test_errors(self) -> None:
        """Test errors are collected in input order."""
        first = RuntimeError("first")
        second = ValueError("second")
        summary = BatchSummary(total=3, successful=1, failed=2, results=(first, True, second))
        assert summary.errors == [first, second]
