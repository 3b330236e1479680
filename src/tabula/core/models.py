"""Query result models for tabula.

Pydantic models for the result set every engine returns and the
renderer consumes.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class ValueType(StrEnum):
    """Value kinds the renderer knows how to display.

    UNKNOWN is the explicit tag for anything outside this set.
    """

    BOOL = "bool"
    INT2 = "int2"
    INT4 = "int4"
    INT8 = "int8"
    FLOAT4 = "float4"
    FLOAT8 = "float8"
    TEXT = "text"
    DATE = "date"
    TIMESTAMP = "timestamp"
    TIMESTAMPTZ = "timestamptz"
    UNKNOWN = "unknown"


class ColumnMeta(BaseModel):
    """Metadata for a single result column.

    value_type is None when the backend types each value on its own
    (document stores); the normalizer then looks at the value itself.
    """

    ordinal: int
    name: str
    type_name: str
    value_type: ValueType | None = None


class QueryResult(BaseModel):
    """Result of one query execution."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    columns: list[ColumnMeta]
    rows: list[tuple[Any, ...]]
    row_count: int
    status_message: str = ""
    engine: str = ""

    @model_validator(mode="after")
    def check_row_shape(self) -> QueryResult:
        width = len(self.columns)
        for index, row in enumerate(self.rows):
            if len(row) != width:
                msg = (
                    f"Row {index + 1} has {len(row)} values, "
                    f"expected {width} (one per column)"
                )
                raise ValueError(msg)
        return self
