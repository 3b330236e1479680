"""PostgreSQL executor for tabula.

Wraps psycopg v3 synchronous connections with query execution,
statement timeout, and exception mapping to the TabulaError hierarchy.
"""

from __future__ import annotations

import time
from typing import Any

import psycopg
import psycopg.errors
import sentry_sdk
import structlog

from tabula.core.config import DEFAULT_TIMEOUT
from tabula.core.exceptions import NetworkError, QueryError, TimeoutError
from tabula.core.models import ColumnMeta, QueryResult, ValueType
from tabula.engines.base import registry

# Mapping from psycopg type OIDs to human-readable names.
# Covers the most common PostgreSQL types; unknown OIDs fall back to "unknown".
_TYPE_NAMES: dict[int, str] = {
    16: "bool",
    20: "int8",
    21: "int2",
    23: "int4",
    25: "text",
    26: "oid",
    114: "json",
    142: "xml",
    700: "float4",
    701: "float8",
    790: "money",
    1042: "bpchar",
    1043: "varchar",
    1082: "date",
    1083: "time",
    1114: "timestamp",
    1184: "timestamptz",
    1186: "interval",
    1700: "numeric",
    2950: "uuid",
    3802: "jsonb",
}

# Types the renderer displays; every other OID renders as UNKNOWN TYPE.
_VALUE_TYPES: dict[int, ValueType] = {
    16: ValueType.BOOL,
    20: ValueType.INT8,
    21: ValueType.INT2,
    23: ValueType.INT4,
    25: ValueType.TEXT,
    700: ValueType.FLOAT4,
    701: ValueType.FLOAT8,
    1043: ValueType.TEXT,
    1082: ValueType.DATE,
    1114: ValueType.TIMESTAMP,
    1184: ValueType.TIMESTAMPTZ,
}


def column_meta(ordinal: int, name: str, type_oid: int) -> ColumnMeta:
    return ColumnMeta(
        ordinal=ordinal,
        name=name,
        type_name=_TYPE_NAMES.get(type_oid, "unknown"),
        value_type=_VALUE_TYPES.get(type_oid, ValueType.UNKNOWN),
    )


class PostgresExecutor:
    """Synchronous PostgreSQL executor using psycopg v3."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout

    def _connect(self, connection: str) -> psycopg.Connection[Any]:
        try:
            return psycopg.connect(connection, autocommit=True)
        except psycopg.OperationalError as e:
            raise NetworkError(f"Connection to PostgreSQL failed: {e}") from e

    def execute(self, query: str, connection: str) -> QueryResult:
        """Execute SQL and return a QueryResult."""
        log = structlog.get_logger()
        timeout_ms = int(self.timeout * 1000)

        sql_normalized = " ".join(query.split())
        span_description = sql_normalized[:100]
        log.debug("executing query", engine="postgres", sql=sql_normalized)
        with (
            self._connect(connection) as conn,
            sentry_sdk.start_span(op="db.query", description=span_description) as span,
        ):
            start_time = time.monotonic()
            try:
                with conn.cursor() as cur:
                    cur.execute(f"SET statement_timeout = {timeout_ms}")
                    cur.execute(query)

                    columns: list[ColumnMeta] = []
                    rows: list[tuple[Any, ...]] = []

                    if cur.description:
                        for ordinal, desc in enumerate(cur.description, start=1):
                            columns.append(
                                column_meta(ordinal, desc.name, desc.type_code)
                            )
                        rows = cur.fetchall()

                    duration_ms = (time.monotonic() - start_time) * 1000
                    span.set_data("row_count", len(rows))
                    span.set_data("duration_ms", duration_ms)
                    log.debug(
                        "query complete",
                        duration_ms=f"{duration_ms:.1f}",
                        row_count=len(rows),
                    )

                    return QueryResult(
                        columns=columns,
                        rows=rows,
                        row_count=len(rows),
                        status_message=cur.statusmessage or "",
                        engine="postgres",
                    )

            except psycopg.errors.QueryCanceled as e:
                duration_ms = (time.monotonic() - start_time) * 1000
                span.set_data("duration_ms", duration_ms)
                span.set_status("deadline_exceeded")
                log.error(
                    "query timeout",
                    sql=sql_normalized,
                    duration_ms=f"{duration_ms:.1f}",
                )
                msg = f"Query timed out after {self.timeout}s: {e}"
                raise TimeoutError(msg) from e
            except psycopg.errors.SyntaxError as e:
                span.set_status("invalid_argument")
                log.error("query syntax error", sql=sql_normalized, error=str(e))
                raise QueryError(f"SQL error: {e}") from e
            except psycopg.OperationalError as e:
                span.set_status("unavailable")
                log.error("database error", sql=sql_normalized, error=str(e))
                raise NetworkError(f"Database error: {e}") from e
            except psycopg.Error as e:
                span.set_status("internal_error")
                log.error("query failed", sql=sql_normalized, error=str(e))
                raise QueryError(f"Query failed: {e}") from e


registry.register("postgres", PostgresExecutor)
