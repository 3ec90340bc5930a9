"""Icon discovery and outline reading.

This module lists the icon files of a source directory and parses single
icons into outlines expressed in font units.
"""

from collections.abc import Callable
from io import StringIO
from pathlib import Path

from svgpathtools import Arc, CubicBezier, Document, Line, QuadraticBezier
from svgpathtools import Path as SvgPath

from svgs2fonts.domain.icon import IconOutline, IconSource
from svgs2fonts.exceptions import IconReadError

ICON_EXTENSION = ".svg"
SVG_NAMESPACE = "http://www.w3.org/2000/svg"

# Decimal places kept for outline coordinates
COORDINATE_PRECISION = 2


def list_icon_sources(directory: Path) -> list[IconSource]:
    """List the icon files of a directory.

    Only regular files whose extension is ``.svg`` (any case) are
    returned, sorted by file name so builds are deterministic.

    Args:
        directory: Directory to scan (not recursive)

    Returns:
        One IconSource per icon file

    Raises:
        FileNotFoundError: If the directory does not exist
        NotADirectoryError: If the path is not a directory
    """
    if not directory.exists():
        raise FileNotFoundError(f"Source directory not found: {directory}")
    if not directory.is_dir():
        raise NotADirectoryError(f"Not a directory: {directory}")

    sources = [
        IconSource(name=entry.stem, path=entry.resolve())
        for entry in directory.iterdir()
        if entry.is_file() and entry.suffix.lower() == ICON_EXTENSION
    ]
    return sorted(sources, key=lambda source: (source.name, source.path.name))


def _parse_view_box(svg_attributes: dict[str, str]) -> tuple[float, float, float, float]:
    """Return (x, y, width, height) of the icon canvas."""
    view_box = svg_attributes.get("viewBox")
    if view_box:
        parts = view_box.replace(",", " ").split()
        if len(parts) == 4:
            x, y, width, height = (float(part) for part in parts)
            if width > 0 and height > 0:
                return x, y, width, height
        raise ValueError(f"invalid viewBox: {view_box!r}")

    width = _parse_length(svg_attributes.get("width"))
    height = _parse_length(svg_attributes.get("height"))
    if width is None or height is None:
        raise ValueError("missing viewBox and width/height")
    return 0.0, 0.0, width, height


def _load_document(text: str) -> Document:
    """Parse icon markup, putting un-namespaced elements in the SVG namespace."""
    document = Document(StringIO(text))
    for element in document.root.iter():
        if isinstance(element.tag, str) and not element.tag.startswith("{"):
            element.tag = f"{{{SVG_NAMESPACE}}}{element.tag}"
    return document


def _parse_length(value: str | None) -> float | None:
    if not value:
        return None
    number = value.strip().removesuffix("px")
    try:
        length = float(number)
    except ValueError:
        return None
    return length if length > 0 else None


def _transform_segments(
    paths: list[SvgPath],
    transform: Callable[[complex], complex],
) -> SvgPath:
    """Apply a point transform to every segment, flattening arcs to cubics."""
    segments = []
    for path in paths:
        for segment in path:
            if isinstance(segment, Line):
                segments.append(Line(transform(segment.start), transform(segment.end)))
            elif isinstance(segment, QuadraticBezier):
                segments.append(
                    QuadraticBezier(
                        transform(segment.start),
                        transform(segment.control),
                        transform(segment.end),
                    )
                )
            elif isinstance(segment, CubicBezier):
                segments.append(_transform_cubic(segment, transform))
            elif isinstance(segment, Arc):
                segments.extend(
                    _transform_cubic(cubic, transform) for cubic in segment.as_cubic_curves()
                )
            else:
                raise ValueError(f"unsupported segment type: {type(segment).__name__}")
    return SvgPath(*segments)


def _transform_cubic(segment: CubicBezier, transform: Callable[[complex], complex]) -> CubicBezier:
    return CubicBezier(
        transform(segment.start),
        transform(segment.control1),
        transform(segment.control2),
        transform(segment.end),
    )


def read_icon_outline(
    source: IconSource,
    font_height: int = 1000,
    descent: int = 0,
    center_horizontally: bool = True,
) -> IconOutline:
    """Read an icon file and normalize its outline to font units.

    ``transform`` attributes of groups and shapes are applied first. The
    icon is then scaled so its canvas height equals ``font_height``, the y
    axis is flipped to point up and the baseline is moved down by
    ``descent``. The advance width keeps the canvas aspect ratio.

    Args:
        source: Icon to read
        font_height: Units per em of the target font
        descent: Font descent in font units
        center_horizontally: Center the outline's bounding box in the advance

    Returns:
        Normalized outline

    Raises:
        IconReadError: If the file cannot be read or has no drawable paths
    """
    try:
        text = source.path.read_text(encoding="utf-8")
        document = _load_document(text)
        view_x, view_y, view_width, view_height = _parse_view_box(dict(document.root.attrib))
        paths = document.paths()
    except (OSError, UnicodeDecodeError, ValueError) as e:
        raise IconReadError(source.path, str(e)) from e
    except Exception as e:
        # XML parser errors surface as several unrelated exception types
        raise IconReadError(source.path, f"invalid SVG: {e}") from e

    drawable = [path for path in paths if len(path) > 0]
    if not drawable:
        raise IconReadError(source.path, "no drawable paths")

    scale = font_height / view_height
    advance_width = max(1, round(view_width * scale))

    def to_font_units(point: complex) -> complex:
        x = (point.real - view_x) * scale
        y = (view_height - (point.imag - view_y)) * scale - descent
        return complex(round(x, COORDINATE_PRECISION), round(y, COORDINATE_PRECISION))

    try:
        outline = _transform_segments(drawable, to_font_units)
        if center_horizontally:
            x_min, x_max, _, _ = outline.bbox()
            offset = round((advance_width - (x_max - x_min)) / 2 - x_min, COORDINATE_PRECISION)
            if offset:
                outline = outline.translated(complex(offset, 0))
        path_data = outline.d()
    except (ValueError, ZeroDivisionError) as e:
        raise IconReadError(source.path, str(e)) from e

    return IconOutline(path_data=path_data, advance_width=advance_width)
