"""Font codecs built on fontTools.

This module turns the intermediate SVG font into a TrueType font and
re-packages TrueType bytes as WOFF, WOFF2 and EOT.
"""

import re
import struct
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from io import BytesIO
from typing import Any

from fontTools.fontBuilder import FontBuilder
from fontTools.pens.cu2quPen import Cu2QuPen
from fontTools.pens.ttGlyphPen import TTGlyphPen
from fontTools.ttLib import TTFont
from svgpathtools import Arc, CubicBezier, Line, QuadraticBezier, parse_path

SVG_NAMESPACE = "http://www.w3.org/2000/svg"

# Maximum approximation error (font units) for cubic to quadratic conversion
CU2QU_MAX_ERR = 1.0

# EOT header constants (version 2.1 layout)
EOT_VERSION = 0x00020001
EOT_MAGIC_NUMBER = 0x504C
EOT_DEFAULT_CHARSET = 1
EOT_FIXED_HEADER = struct.Struct("<4L10s2BL2H4L2LL4LH")

NAME_ID_FAMILY = 1
NAME_ID_STYLE = 2
NAME_ID_FULL_NAME = 4
NAME_ID_VERSION = 5


@dataclass
class SvgGlyph:
    """A glyph parsed back from the SVG font."""

    name: str
    codepoint: int | None
    path_data: str
    advance_width: int


@dataclass
class SvgFont:
    """Metrics and glyphs of an SVG font."""

    family: str
    units_per_em: int
    ascent: int
    descent: int
    default_advance: int
    glyphs: list[SvgGlyph]


def _find(element: ET.Element, tag: str) -> ET.Element | None:
    found = element.find(f".//{{{SVG_NAMESPACE}}}{tag}")
    if found is None:
        found = element.find(f".//{tag}")
    return found


def _find_all(element: ET.Element, tag: str) -> list[ET.Element]:
    return element.findall(f"{{{SVG_NAMESPACE}}}{tag}") or element.findall(tag)


def parse_svg_font(svg_text: str) -> SvgFont:
    """Parse SVG font markup.

    Raises:
        ValueError: If the markup is not an SVG font
    """
    try:
        root = ET.fromstring(svg_text)
    except ET.ParseError as e:
        raise ValueError(f"Invalid SVG font: {e}") from e

    font_el = _find(root, "font")
    if font_el is None:
        raise ValueError("SVG font has no <font> element")

    face = _find(font_el, "font-face")
    face_attrs = face.attrib if face is not None else {}
    units_per_em = int(face_attrs.get("units-per-em", "1000"))
    ascent = int(float(face_attrs.get("ascent", str(units_per_em))))
    descent = abs(int(float(face_attrs.get("descent", "0"))))
    default_advance = int(float(font_el.attrib.get("horiz-adv-x", str(units_per_em))))

    glyphs = []
    for index, glyph_el in enumerate(_find_all(font_el, "glyph")):
        unicode_value = glyph_el.attrib.get("unicode")
        codepoint = ord(unicode_value) if unicode_value and len(unicode_value) == 1 else None
        glyphs.append(
            SvgGlyph(
                name=glyph_el.attrib.get("glyph-name") or f"glyph{index}",
                codepoint=codepoint,
                path_data=glyph_el.attrib.get("d", ""),
                advance_width=int(float(glyph_el.attrib.get("horiz-adv-x", default_advance))),
            )
        )

    return SvgFont(
        family=font_el.attrib.get("id") or face_attrs.get("font-family", "iconfont"),
        units_per_em=units_per_em,
        ascent=ascent,
        descent=descent,
        default_advance=default_advance,
        glyphs=glyphs,
    )


def _point(value: complex) -> tuple[float, float]:
    return (value.real, value.imag)


def draw_path_data(path_data: str, pen: Any) -> None:
    """Draw SVG path data onto a segment pen, closing every subpath.

    Coordinates are used as-is (the SVG font is already y-up).
    """
    path = parse_path(path_data)
    subpath_open = False
    current: complex | None = None

    for segment in path:
        if not subpath_open or segment.start != current:
            if subpath_open:
                pen.closePath()
            pen.moveTo(_point(segment.start))
            subpath_open = True

        if isinstance(segment, Line):
            pen.lineTo(_point(segment.end))
        elif isinstance(segment, QuadraticBezier):
            pen.qCurveTo(_point(segment.control), _point(segment.end))
        elif isinstance(segment, CubicBezier):
            pen.curveTo(_point(segment.control1), _point(segment.control2), _point(segment.end))
        elif isinstance(segment, Arc):
            for cubic in segment.as_cubic_curves():
                pen.curveTo(_point(cubic.control1), _point(cubic.control2), _point(cubic.end))
        else:
            raise ValueError(f"Unsupported segment type: {type(segment).__name__}")
        current = segment.end

    if subpath_open:
        pen.closePath()


def _glyph_name(glyph: SvgGlyph, taken: set[str]) -> str:
    """Sanitize a glyph name and make it unique within the font."""
    name = re.sub(r"[^A-Za-z0-9._]", "_", glyph.name)
    if not name or name[0].isdigit() or name.startswith("."):
        name = f"uni{glyph.codepoint:04X}" if glyph.codepoint is not None else f"g_{name}"
    candidate = name
    suffix = 1
    while candidate in taken:
        candidate = f"{name}.{suffix}"
        suffix += 1
    taken.add(candidate)
    return candidate


def svg_font_to_ttf(svg_text: str, font_name: str | None = None) -> bytes:
    """Compile SVG font markup into TrueType bytes.

    Args:
        svg_text: SVG font markup
        font_name: Family name (defaults to the SVG font id)

    Returns:
        TrueType font data

    Raises:
        ValueError: If the markup or a glyph outline cannot be parsed
    """
    svg_font = parse_svg_font(svg_text)
    family = font_name or svg_font.family

    glyph_order = [".notdef"]
    glyphs = {".notdef": TTGlyphPen(None).glyph()}
    metrics: dict[str, tuple[int, int]] = {".notdef": (svg_font.default_advance, 0)}
    cmap: dict[int, str] = {}
    taken = {".notdef"}

    for entry in svg_font.glyphs:
        name = _glyph_name(entry, taken)
        tt_pen = TTGlyphPen(None)
        if entry.path_data.strip():
            draw_path_data(
                entry.path_data,
                Cu2QuPen(tt_pen, max_err=CU2QU_MAX_ERR, reverse_direction=True),
            )
        glyph = tt_pen.glyph()
        glyph.recalcBounds(None)

        glyph_order.append(name)
        glyphs[name] = glyph
        metrics[name] = (entry.advance_width, getattr(glyph, "xMin", 0))
        if entry.codepoint is not None:
            cmap[entry.codepoint] = name

    builder = FontBuilder(svg_font.units_per_em, isTTF=True)
    builder.setupGlyphOrder(glyph_order)
    builder.setupCharacterMap(cmap)
    builder.setupGlyf(glyphs)
    builder.setupHorizontalMetrics(metrics)
    builder.setupHorizontalHeader(ascent=svg_font.ascent, descent=-svg_font.descent)
    builder.setupOS2(
        sTypoAscender=svg_font.ascent,
        sTypoDescender=-svg_font.descent,
        sTypoLineGap=0,
        usWinAscent=svg_font.ascent,
        usWinDescent=svg_font.descent,
    )
    ps_name = re.sub(r"[^A-Za-z0-9-]", "", family) or "iconfont"
    builder.setupNameTable({
        "familyName": family,
        "styleName": "Regular",
        "uniqueFontIdentifier": f"{ps_name}-Regular",
        "fullName": family,
        "psName": ps_name,
        "version": "Version 1.0",
    })
    builder.setupPost()
    builder.setupMaxp()

    buffer = BytesIO()
    builder.save(buffer)
    return buffer.getvalue()


def _with_flavor(ttf_data: bytes, flavor: str) -> bytes:
    font = TTFont(BytesIO(ttf_data))
    font.flavor = flavor
    buffer = BytesIO()
    font.save(buffer)
    return buffer.getvalue()


def ttf_to_woff(ttf_data: bytes) -> bytes:
    """Wrap TrueType data as WOFF."""
    return _with_flavor(ttf_data, "woff")


def ttf_to_woff2(ttf_data: bytes) -> bytes:
    """Wrap TrueType data as WOFF2 (requires brotli)."""
    return _with_flavor(ttf_data, "woff2")


def _eot_name(font: TTFont, name_id: int) -> bytes:
    value = font["name"].getDebugName(name_id) or ""
    return value.encode("utf-16-le")


def ttf_to_eot(ttf_data: bytes) -> bytes:
    """Wrap TrueType data in an uncompressed Embedded OpenType container.

    The header copies PANOSE, weight, embedding flags, Unicode and code
    page ranges from the OS/2 table and the checksum adjustment from the
    head table; the TrueType data follows unchanged.
    """
    font = TTFont(BytesIO(ttf_data))
    os2 = font["OS/2"]
    head = font["head"]

    panose = os2.panose
    panose_bytes = bytes([
        panose.bFamilyType, panose.bSerifStyle, panose.bWeight, panose.bProportion,
        panose.bContrast, panose.bStrokeVariation, panose.bArmStyle,
        panose.bLetterForm, panose.bMidline, panose.bXHeight,
    ])

    names = b""
    for name_id in (NAME_ID_FAMILY, NAME_ID_STYLE, NAME_ID_VERSION, NAME_ID_FULL_NAME):
        encoded = _eot_name(font, name_id)
        # Padding2..Padding4 precede each name after the family name
        if name_id != NAME_ID_FAMILY:
            names += struct.pack("<H", 0)
        names += struct.pack("<H", len(encoded)) + encoded
    # Padding5 then an empty RootString
    names += struct.pack("<HH", 0, 0)

    eot_size = EOT_FIXED_HEADER.size + len(names) + len(ttf_data)
    header = EOT_FIXED_HEADER.pack(
        eot_size,
        len(ttf_data),
        EOT_VERSION,
        0,
        panose_bytes,
        EOT_DEFAULT_CHARSET,
        1 if os2.fsSelection & 0x01 else 0,
        os2.usWeightClass,
        os2.fsType,
        EOT_MAGIC_NUMBER,
        os2.ulUnicodeRange1,
        os2.ulUnicodeRange2,
        os2.ulUnicodeRange3,
        os2.ulUnicodeRange4,
        getattr(os2, "ulCodePageRange1", 0),
        getattr(os2, "ulCodePageRange2", 0),
        head.checkSumAdjustment,
        0, 0, 0, 0,
        0,
    )
    return header + names + ttf_data
