"""Cell value normalization.

Every backend-native value becomes one display string. Normalization
never raises: nulls render as NULL, unsupported kinds as UNKNOWN TYPE.
"""

from __future__ import annotations

import math
import struct
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from tabula.core.models import ValueType

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tabula.core.models import ColumnMeta

NULL_TEXT = "NULL"
UNKNOWN_TEXT = "UNKNOWN TYPE"

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1

_INT_TYPES = frozenset({ValueType.INT2, ValueType.INT4, ValueType.INT8})
_FLOAT_TYPES = frozenset({ValueType.FLOAT4, ValueType.FLOAT8})

_CONTROL_ESCAPES = {code: f"\\x{code:02x}" for code in (*range(0x20), 0x7F)}
_CONTROL_ESCAPES.update({ord("\n"): "\\n", ord("\r"): "\\r", ord("\t"): "\\t"})


def _format_float(value: float) -> str:
    """Shortest decimal form, never in exponent notation."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = format(Decimal(repr(value)), "f")
    if text.endswith(".0"):
        text = text[:-2]
    return text


def _as_float32(value: float) -> float:
    """Shortest decimal that reads back as the same single-precision value."""
    if math.isnan(value) or math.isinf(value):
        return value
    try:
        (single,) = struct.unpack("f", struct.pack("f", value))
    except OverflowError:
        return value
    for digits in range(1, 10):
        candidate = float(f"{single:.{digits}g}")
        try:
            (packed,) = struct.unpack("f", struct.pack("f", candidate))
        except OverflowError:
            continue
        if packed == single:
            return candidate
    return single


def _format_timestamp(value: datetime) -> str:
    return value.isoformat(sep=" ")


def _format_timestamptz(value: datetime) -> str:
    try:
        return value.astimezone(timezone.utc).isoformat(sep=" ")
    except (OverflowError, ValueError):
        # UTC equivalent falls outside the datetime range
        return value.isoformat(sep=" ")


def _escape_text(value: str) -> str:
    """Spell out control characters so a cell stays on one line."""
    return value.translate(_CONTROL_ESCAPES)


def _matches(value: Any, value_type: ValueType) -> bool:
    if value_type is ValueType.BOOL:
        return isinstance(value, bool)
    if value_type in _INT_TYPES:
        return isinstance(value, int) and not isinstance(value, bool)
    if value_type in _FLOAT_TYPES:
        return isinstance(value, (float, int)) and not isinstance(value, bool)
    if value_type is ValueType.TEXT:
        return isinstance(value, str)
    if value_type is ValueType.DATE:
        return isinstance(value, date) and not isinstance(value, datetime)
    if value_type is ValueType.TIMESTAMP:
        return isinstance(value, datetime) and value.tzinfo is None
    if value_type is ValueType.TIMESTAMPTZ:
        return isinstance(value, datetime) and value.tzinfo is not None
    return False


def infer_value_type(value: Any) -> ValueType:
    """Pick a tag from the Python type of a value.

    Used for backends that type each value separately rather than per column.
    """
    if isinstance(value, bool):
        return ValueType.BOOL
    if isinstance(value, int):
        if _INT32_MIN <= value <= _INT32_MAX:
            return ValueType.INT4
        return ValueType.INT8
    if isinstance(value, float):
        return ValueType.FLOAT8
    if isinstance(value, str):
        return ValueType.TEXT
    if isinstance(value, datetime):
        return ValueType.TIMESTAMP if value.tzinfo is None else ValueType.TIMESTAMPTZ
    if isinstance(value, date):
        return ValueType.DATE
    return ValueType.UNKNOWN


def normalize_value(value: Any, value_type: ValueType | str) -> str:
    """Render one cell value as its display string.

    A value that does not match its declared type is treated as
    undecodable and renders as NULL.
    """
    if value is None:
        return NULL_TEXT
    try:
        tag = ValueType(value_type)
    except (ValueError, TypeError):
        return UNKNOWN_TEXT

    if tag is ValueType.UNKNOWN:
        return UNKNOWN_TEXT
    if not _matches(value, tag):
        return NULL_TEXT

    if tag is ValueType.BOOL:
        return "true" if value else "false"
    if tag in _INT_TYPES:
        return str(value)
    if tag in _FLOAT_TYPES:
        try:
            number = float(value)
        except OverflowError:
            return str(value)
        if tag is ValueType.FLOAT4:
            number = _as_float32(number)
        return _format_float(number)
    if tag is ValueType.DATE:
        return value.isoformat()
    if tag is ValueType.TIMESTAMP:
        return _format_timestamp(value)
    if tag is ValueType.TIMESTAMPTZ:
        return _format_timestamptz(value)
    return _escape_text(value)


def normalize_row(row: Sequence[Any], columns: Sequence[ColumnMeta]) -> list[str]:
    """Normalize every cell of a row against its column's type."""
    cells = []
    for value, column in zip(row, columns, strict=True):
        value_type = column.value_type
        if value_type is None:
            value_type = infer_value_type(value)
        cells.append(normalize_value(value, value_type))
    return cells
