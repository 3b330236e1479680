"""Box-drawn table formatter for QueryResult output."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tabula.rendering import get_glyphs, render_result

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tabula.core.models import QueryResult


class BoxTableFormatter:
    def __init__(self, style: str = "heavy") -> None:
        get_glyphs(style)
        self.style = style

    def format(self, result: QueryResult) -> Iterator[str]:
        # Widths depend on every row, so the table is drawn in full first.
        yield from render_result(result, style=self.style)
