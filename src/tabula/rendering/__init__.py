"""Result normalization and box table rendering."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tabula.rendering.box import BoxGlyphs, get_glyphs, render_table
from tabula.rendering.values import normalize_row, normalize_value
from tabula.rendering.widths import column_widths

if TYPE_CHECKING:
    from tabula.core.models import QueryResult

__all__ = [
    "BoxGlyphs",
    "column_widths",
    "get_glyphs",
    "normalize_row",
    "normalize_value",
    "render_result",
    "render_table",
]


def render_result(result: QueryResult, style: str = "heavy") -> list[str]:
    """Normalize, size and draw a query result as table lines."""
    glyphs = get_glyphs(style)
    rows = [normalize_row(row, result.columns) for row in result.rows]
    widths = column_widths(result.columns, rows)
    headers = [col.name.upper() for col in result.columns]
    return render_table(headers, rows, widths, glyphs)
