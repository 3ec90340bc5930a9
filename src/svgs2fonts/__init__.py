"""svgs2fonts - Build icon webfonts from directories of SVG icons.

svgs2fonts merges a directory of SVG icons into an SVG font, assigns every
icon a stable private code point, and converts the result to TTF, EOT, WOFF
and WOFF2. Demo HTML/CSS pages showing every icon are written alongside.

Example:
    $ svgs2fonts icons/ dist/ --name my-icons

This will create dist/my-icons.svg, dist/my-icons.ttf, dist/my-icons.eot,
dist/my-icons.woff, dist/my-icons.woff2 and the demo pages.

From Python:
    >>> import asyncio
    >>> from svgs2fonts.core import build
    >>> asyncio.run(build(src="icons", dist="dist", font_name="my-icons"))
    True
"""

__version__ = "2.2.0"
__author__ = "svgs2fonts contributors"

__all__ = ["__author__", "__version__"]
