"""Unicode box-drawn table rendering.

A table is drawn top to bottom: top border, header, header divider, then
one content line and one divider per row. The divider after the last row
is the bottom border.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from tabula.core.exceptions import ConfigError, EmptyResultSetError

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass(frozen=True)
class BoxGlyphs:
    """Characters for one box-drawing style."""

    top_left: str
    top_tee: str
    top_right: str
    left_tee: str
    cross: str
    right_tee: str
    bottom_left: str
    bottom_tee: str
    bottom_right: str
    horizontal: str
    vertical: str


HEAVY = BoxGlyphs("┏", "┳", "┓", "┣", "╋", "┫", "┗", "┻", "┛", "━", "┃")
LIGHT = BoxGlyphs("┌", "┬", "┐", "├", "┼", "┤", "└", "┴", "┘", "─", "│")
ASCII = BoxGlyphs("+", "+", "+", "+", "+", "+", "+", "+", "+", "-", "|")

STYLES: dict[str, BoxGlyphs] = {
    "heavy": HEAVY,
    "light": LIGHT,
    "ascii": ASCII,
}


def get_glyphs(style: str) -> BoxGlyphs:
    """Look up a glyph set by style name.

    Raises ConfigError if the style is not known.
    """
    if style not in STYLES:
        available = ", ".join(sorted(STYLES))
        msg = f"Unknown table style {style!r}. Available: {available}"
        raise ConfigError(msg)
    return STYLES[style]


def rule(
    widths: Sequence[int], left: str, junction: str, right: str, fill: str
) -> str:
    """Draw a horizontal border or divider."""
    return left + junction.join(fill * w for w in widths) + right


def content_line(cells: Sequence[str], widths: Sequence[int], vertical: str) -> str:
    """Draw one header or body line.

    Each cell gets one leading space and is right-padded to its column width.
    """
    segments = [
        " " + text + " " * (width - len(text) - 1)
        for text, width in zip(cells, widths, strict=True)
    ]
    return vertical + vertical.join(segments) + vertical


def render_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    widths: Sequence[int],
    glyphs: BoxGlyphs = HEAVY,
) -> list[str]:
    """Draw a complete table from header labels, normalized rows and widths."""
    if not rows:
        msg = "Query returned no rows; nothing to render."
        raise EmptyResultSetError(msg)

    g = glyphs
    divider = rule(widths, g.left_tee, g.cross, g.right_tee, g.horizontal)
    lines = [
        rule(widths, g.top_left, g.top_tee, g.top_right, g.horizontal),
        content_line(headers, widths, g.vertical),
        divider,
    ]

    last = len(rows) - 1
    for index, row in enumerate(rows):
        lines.append(content_line(row, widths, g.vertical))
        if index < last:
            lines.append(divider)
        else:
            lines.append(
                rule(widths, g.bottom_left, g.bottom_tee, g.bottom_right, g.horizontal)
            )
    return lines
