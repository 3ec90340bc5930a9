"""Demo page generation.

Renders two HTML pages with their stylesheets: one showing each glyph
through its character reference and one through a generated CSS class.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from html import escape
from pathlib import Path

import structlog

from svgs2fonts.config import BuildSettings
from svgs2fonts.io.writer import write_text

logger = structlog.get_logger(__name__)

_CSS_UNSAFE = re.compile(r"[^A-Za-z0-9_-]")

# Order of entries in the @font-face src list
FONT_FACE_ORDER: tuple[tuple[str, str], ...] = (
    ("woff2", "format('woff2')"),
    ("woff", "format('woff')"),
    ("eot", "format('embedded-opentype')"),
    ("ttf", "format('truetype')"),
    ("svg", "format('svg')"),
)

PAGE_STYLE = """\
  * {margin: 0;padding: 0;}
  html, body {width: 100%;}
  h3 {font-weight: normal;}
  .m-demos_ctn {margin-top: 50px;padding-right: 320px;display: flex;flex-wrap: wrap;justify-content: space-around;}
  .m-demos_ctn li {list-style: none;text-align: center;width: 150px;min-height: 150px;}
  .m-icon_ctn {width: 150px;height: 60px;}
  .m-code_ctn {position: fixed;right: 0;top: 0;z-index: 2;padding: 5px 10px;width: 300px;max-height: 100%;overflow-y: auto;background-color: #fff;box-shadow: 0 0 20px #999;}
  .m-code_ctn pre {white-space: pre-wrap;padding: 5px;color: #fff;background-color: #222;}
  @keyframes colors {
    from {font-size: 26px;color: red;}
    25% {color: yellow;}
    50% {font-size: 66px;color: green;}
    75% {color: blue;}
    to {font-size: 26px;color: red;}
  }
"""


def render_font_face(font_name: str, formats: list[str]) -> str:
    """Render the @font-face rule for the generated formats only."""
    lines = ["@font-face {", f"  font-family: '{font_name}';"]
    if "eot" in formats:
        lines.append(f"  src: url('{font_name}.eot');")

    sources = []
    for name, hint in FONT_FACE_ORDER:
        if name not in formats:
            continue
        if name == "eot":
            url = f"{font_name}.eot?#iefix"
        elif name == "svg":
            url = f"{font_name}.svg#{font_name}"
        else:
            url = f"{font_name}.{name}"
        sources.append(f"url('{url}') {hint}")
    if sources:
        lines.append("  src: " + ",\n    ".join(sources) + ";")

    lines.append("}")
    return "\n".join(lines) + "\n"


def class_name(font_name: str, icon_name: str) -> str:
    """CSS class for an icon. Characters outside [A-Za-z0-9_-] become "-"."""
    return _CSS_UNSAFE.sub("-", f"{font_name}-{icon_name}")


def unicode_fragment(icon_name: str, codepoint: int) -> str:
    """List item showing the glyph by character reference."""
    name = escape(icon_name, quote=True)
    return (
        f'<li><p class="m-icon_ctn" title="{name}">'
        f'<em class="u-iconfont">&#{codepoint};</em></p>'
        f"<p>{name}： &amp;#{codepoint};</p></li>"
    )


def class_fragment(font_name: str, icon_name: str) -> str:
    """List item showing the glyph by CSS class."""
    name = escape(icon_name, quote=True)
    css_class = escape(class_name(font_name, icon_name), quote=True)
    return (
        f'<li><p class="m-icon_ctn" title="{name}">'
        f'<i class="u-iconfont {css_class}"></i></p>'
        f"<p>{name}： .{css_class}</p></li>"
    )


def css_rule(font_name: str, icon_name: str, codepoint: int) -> str:
    return f'.{class_name(font_name, icon_name)}:before {{ content: "\\{codepoint:x}"; }}'


def render_page(font_name: str, css_file: str, font_face: str, items: list[str]) -> str:
    family = escape(font_name, quote=True)
    body = "\n  ".join(items)
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width,initial-scale=1.0" />
  <style type="text/css">
{PAGE_STYLE}  .u-iconfont {{
    font-family: "{family}" !important;
    display: inline-block;
    font-size: 26px;
    font-style: normal;
    -webkit-font-smoothing: antialiased;
    -moz-osx-font-smoothing: grayscale;
    animation: colors 3s infinite linear;
  }}
  </style>
  <link rel="stylesheet" href="./{escape(css_file, quote=True)}" />
  <title>{family} demo</title>
</head>
<body>
  <h1>{family} (by svgs2fonts)</h1>

  <section class="m-code_ctn">
    <h3>Main CSS codes:</h3>
    <pre>
{escape(font_face)}
    </pre>
  </section>

  <ul class="m-demos_ctn">
  {body}
  </ul>
</body>
</html>
"""


@dataclass
class DemoContent:
    """Rendered demo files keyed by file name."""

    icon_count: int
    files: dict[str, str] = field(default_factory=dict)


class DemoBuilder:
    """Renders and writes the demo pages for one build.

    Example:
        builder = DemoBuilder(settings, assembly.assignment)
        paths = builder.write()
    """

    def __init__(self, settings: BuildSettings, assignment: Mapping[str, int]) -> None:
        self._settings = settings
        self._assignment = assignment

    def render(self) -> DemoContent:
        settings = self._settings
        font_name = settings.font_name
        font_face = render_font_face(font_name, settings.font_formats)

        unicode_items = []
        class_items = []
        rules = []
        for icon_name, codepoint in self._assignment.items():
            unicode_items.append(unicode_fragment(icon_name, codepoint))
            class_items.append(class_fragment(font_name, icon_name))
            rules.append(css_rule(font_name, icon_name, codepoint))

        unicode_css = Path(settings.demo_unicode_html).with_suffix(".css").name
        class_css = Path(settings.demo_font_class_html).with_suffix(".css").name

        content = DemoContent(icon_count=len(self._assignment))
        content.files[settings.demo_unicode_html] = render_page(
            font_name, unicode_css, font_face, unicode_items
        )
        content.files[unicode_css] = font_face
        content.files[settings.demo_font_class_html] = render_page(
            font_name, class_css, font_face, class_items
        )
        content.files[class_css] = font_face + "\n" + "\n".join(rules) + "\n"
        return content

    def write(self) -> list[Path]:
        """Render and write every demo file.

        Raises:
            OSError: If a file cannot be written
        """
        content = self.render()
        written = []
        for file_name, text in content.files.items():
            path = self._settings.dist / file_name
            write_text(path, text)
            written.append(path)

        logger.info(
            "Demo files written",
            icons=content.icon_count,
            files=[path.name for path in written],
        )
        return written
