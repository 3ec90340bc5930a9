"""Shared fixtures for svgs2fonts tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

SQUARE_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24">'
    '<path d="M4 4 H20 V20 H4 Z"/></svg>'
)

TRIANGLE_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24">'
    '<path d="M12 2 L22 22 L2 22 Z"/></svg>'
)

IconWriter = Callable[..., Path]


def _write_icon(directory: Path, name: str, content: str = SQUARE_SVG) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{name}.svg"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def write_icon() -> IconWriter:
    """Function writing ``<directory>/<name>.svg`` (a square by default)."""
    return _write_icon


@pytest.fixture
def square_svg() -> str:
    return SQUARE_SVG


@pytest.fixture
def icon_dir(tmp_path: Path) -> Path:
    """Directory with three valid icons: a, b and c."""
    directory = tmp_path / "icons"
    _write_icon(directory, "a", SQUARE_SVG)
    _write_icon(directory, "b", TRIANGLE_SVG)
    _write_icon(directory, "c", SQUARE_SVG)
    return directory


@pytest.fixture
def dist_dir(tmp_path: Path) -> Path:
    return tmp_path / "dist"
