"""Table style selection and output delivery."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

import structlog

from tabula.core.sink import deliver
from tabula.formatters.table import BoxTableFormatter

if TYPE_CHECKING:
    from tabula.core.models import QueryResult
    from tabula.formatters.base import Formatter


class TableStyle(StrEnum):
    HEAVY = "heavy"
    LIGHT = "light"
    ASCII = "ascii"


def get_formatter(style: str = TableStyle.HEAVY) -> Formatter:
    """Build and return the table formatter for a style name."""
    return BoxTableFormatter(style=str(style))


def write_output(formatter: Formatter, result: QueryResult, target: str) -> int:
    """Render the whole table, then hand it to the sink in one piece.

    Rendering errors surface before the target is touched.
    """
    log = structlog.get_logger()
    lines = list(formatter.format(result))
    count = deliver(lines, target)
    log.debug("table delivered", target=target, lines=count, rows=result.row_count)
    return count
