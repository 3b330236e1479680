"""MongoDB executor for tabula.

Runs a find() with a JSON filter against one collection and flattens the
returned documents into rows. Columns come from the keys of the first
document; documents are typed per value, so columns carry no value type.
"""

from __future__ import annotations

import json
import time
from typing import Any

import sentry_sdk
import structlog
from bson import ObjectId
from pymongo import MongoClient
from pymongo.errors import (
    ConfigurationError,
    ConnectionFailure,
    ExecutionTimeout,
    PyMongoError,
)

from tabula.core.config import DEFAULT_TIMEOUT
from tabula.core.exceptions import (
    ConfigError,
    InputError,
    NetworkError,
    QueryError,
    TimeoutError,
)
from tabula.core.models import ColumnMeta, QueryResult
from tabula.engines.base import registry


def parse_filter(query: str) -> dict[str, Any]:
    """Parse the query text as a JSON filter document. Blank means match all."""
    if not query.strip():
        return {}
    try:
        parsed = json.loads(query)
    except json.JSONDecodeError as e:
        raise InputError(f"Invalid MongoDB filter (expected JSON): {e}") from e
    if not isinstance(parsed, dict):
        msg = f"Invalid MongoDB filter: expected a JSON object, got {type(parsed).__name__}"
        raise InputError(msg)
    return parsed


def _cell(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    return value


def documents_to_result(documents: list[dict[str, Any]]) -> QueryResult:
    """Flatten documents into a QueryResult keyed on the first document."""
    if not documents:
        return QueryResult(
            columns=[], rows=[], row_count=0, status_message="FIND 0", engine="mongo"
        )

    names = list(documents[0].keys())
    columns = [
        ColumnMeta(ordinal=ordinal, name=name, type_name="document")
        for ordinal, name in enumerate(names, start=1)
    ]
    rows = [tuple(_cell(doc.get(name)) for name in names) for doc in documents]
    return QueryResult(
        columns=columns,
        rows=rows,
        row_count=len(rows),
        status_message=f"FIND {len(rows)}",
        engine="mongo",
    )


class MongoExecutor:
    """Synchronous MongoDB executor using pymongo."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        database: str | None = None,
        collection: str | None = None,
        limit: int | None = None,
    ) -> None:
        self.timeout = timeout
        self.database = database
        self.collection = collection
        self.limit = limit

    def _database_name(self, client: MongoClient[Any]) -> str:
        if self.database:
            return self.database
        try:
            return client.get_default_database().name
        except ConfigurationError:
            msg = "No MongoDB database given. Set --database or include it in the URI."
            raise ConfigError(msg) from None

    def execute(self, query: str, connection: str) -> QueryResult:
        """Run a find() with the query as filter and return a QueryResult."""
        log = structlog.get_logger()
        if not self.collection:
            msg = "No MongoDB collection given. Set --collection or a profile collection."
            raise ConfigError(msg)

        filter_doc = parse_filter(query)
        timeout_ms = int(self.timeout * 1000)
        log.debug(
            "executing query",
            engine="mongo",
            collection=self.collection,
            filter=filter_doc,
        )

        try:
            client: MongoClient[Any] = MongoClient(
                connection, serverSelectionTimeoutMS=timeout_ms
            )
        except ConfigurationError as e:
            raise ConfigError(f"Invalid MongoDB connection string: {e}") from e

        with (
            client,
            sentry_sdk.start_span(
                op="db.query", description=f"find {self.collection}"
            ) as span,
        ):
            start_time = time.monotonic()
            try:
                db = client[self._database_name(client)]
                cursor = db[self.collection].find(filter_doc, max_time_ms=timeout_ms)
                if self.limit:
                    cursor = cursor.limit(self.limit)
                documents = list(cursor)
            except ExecutionTimeout as e:
                span.set_status("deadline_exceeded")
                log.error("query timeout", collection=self.collection)
                msg = f"Query timed out after {self.timeout}s: {e}"
                raise TimeoutError(msg) from e
            except ConnectionFailure as e:
                span.set_status("unavailable")
                log.error("database error", error=str(e))
                raise NetworkError(f"Connection to MongoDB failed: {e}") from e
            except PyMongoError as e:
                span.set_status("internal_error")
                log.error("query failed", error=str(e))
                raise QueryError(f"Query failed: {e}") from e

            duration_ms = (time.monotonic() - start_time) * 1000
            span.set_data("row_count", len(documents))
            span.set_data("duration_ms", duration_ms)
            log.debug(
                "query complete",
                duration_ms=f"{duration_ms:.1f}",
                row_count=len(documents),
            )

        return documents_to_result(documents)


registry.register("mongo", MongoExecutor)
