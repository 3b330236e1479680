"""Column display width accumulation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tabula.core.exceptions import EmptyResultSetError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tabula.core.models import ColumnMeta

# One space of padding on each side of a cell.
PADDING = 2


def column_widths(
    columns: Sequence[ColumnMeta], rows: Sequence[Sequence[str]]
) -> list[int]:
    """Return the display width of each column, in column order.

    Widths start at the header name plus padding and grow to fit the
    widest normalized cell. Raises EmptyResultSetError when there are no
    columns or no rows to size the table from.
    """
    if not columns:
        msg = "Query returned no columns; nothing to render."
        raise EmptyResultSetError(msg)
    if not rows:
        msg = "Query returned no rows; nothing to render."
        raise EmptyResultSetError(msg)

    widths = [len(col.name.upper()) + PADDING for col in columns]
    for row in rows:
        for index, cell in enumerate(row):
            length = len(cell) + PADDING
            if widths[index] < length:
                widths[index] = length
    return widths
