"""Tests for PostgresExecutor.

Unit tests stand in a mock for psycopg.connect; integration tests need a
reachable server (see tests/integration_config.py).
"""

from datetime import date
from types import SimpleNamespace
from unittest.mock import MagicMock, call, patch

import psycopg
import psycopg.errors
import pytest

from tabula.core.exceptions import NetworkError, QueryError, TimeoutError
from tabula.core.models import ValueType
from tabula.engines.postgres import PostgresExecutor, column_meta
from tabula.rendering import render_result
from tests.integration_config import TEST_PG_CONNECTION


def _mock_connection(description=None, rows=None, status="SELECT 0", execute_effect=None):
    cur = MagicMock()
    cur.__enter__.return_value = cur
    cur.description = description
    cur.fetchall.return_value = rows or []
    cur.statusmessage = status
    if execute_effect is not None:
        cur.execute.side_effect = execute_effect

    conn = MagicMock()
    conn.__enter__.return_value = conn
    conn.cursor.return_value = cur
    return conn, cur


def _desc(name, oid):
    return SimpleNamespace(name=name, type_code=oid)


@pytest.mark.unit
class TestColumnMeta:
    @pytest.mark.parametrize(
        ("oid", "type_name", "value_type"),
        [
            (16, "bool", ValueType.BOOL),
            (21, "int2", ValueType.INT2),
            (23, "int4", ValueType.INT4),
            (20, "int8", ValueType.INT8),
            (700, "float4", ValueType.FLOAT4),
            (701, "float8", ValueType.FLOAT8),
            (25, "text", ValueType.TEXT),
            (1043, "varchar", ValueType.TEXT),
            (1082, "date", ValueType.DATE),
            (1114, "timestamp", ValueType.TIMESTAMP),
            (1184, "timestamptz", ValueType.TIMESTAMPTZ),
            (1700, "numeric", ValueType.UNKNOWN),
            (2950, "uuid", ValueType.UNKNOWN),
            (999999, "unknown", ValueType.UNKNOWN),
        ],
    )
    def test_oid_mapping(self, oid, type_name, value_type):
        col = column_meta(1, "c", oid)
        assert col.type_name == type_name
        assert col.value_type is value_type


@pytest.mark.unit
class TestExecute:
    def test_returns_query_result(self):
        conn, cur = _mock_connection(
            description=[_desc("id", 23), _desc("born", 1082)],
            rows=[(1, date(2001, 2, 3)), (2, None)],
            status="SELECT 2",
        )
        with patch("tabula.engines.postgres.psycopg.connect", return_value=conn) as connect:
            result = PostgresExecutor(timeout=2.5).execute(
                "select id, born from dummies", "host=db dbname=x"
            )

        connect.assert_called_once_with("host=db dbname=x", autocommit=True)
        assert cur.execute.call_args_list == [
            call("SET statement_timeout = 2500"),
            call("select id, born from dummies"),
        ]
        assert result.engine == "postgres"
        assert result.row_count == 2
        assert result.status_message == "SELECT 2"
        assert [c.name for c in result.columns] == ["id", "born"]
        assert [c.ordinal for c in result.columns] == [1, 2]
        assert result.rows == [(1, date(2001, 2, 3)), (2, None)]

    def test_result_renders(self):
        conn, _ = _mock_connection(
            description=[_desc("flag", 16), _desc("amount", 1700)],
            rows=[(True, "12.50")],
            status="SELECT 1",
        )
        with patch("tabula.engines.postgres.psycopg.connect", return_value=conn):
            result = PostgresExecutor().execute("select 1", "host=db")

        assert render_result(result)[3] == "┃ true ┃ UNKNOWN TYPE ┃"

    def test_statement_without_columns(self):
        conn, cur = _mock_connection(description=None, status="CREATE TABLE")
        with patch("tabula.engines.postgres.psycopg.connect", return_value=conn):
            result = PostgresExecutor().execute("create table t (id int)", "host=db")

        assert result.columns == []
        assert result.rows == []
        assert result.status_message == "CREATE TABLE"
        cur.fetchall.assert_not_called()

    def test_connection_closed_after_query(self):
        conn, _ = _mock_connection(description=[_desc("n", 23)], rows=[(1,)])
        with patch("tabula.engines.postgres.psycopg.connect", return_value=conn):
            PostgresExecutor().execute("select 1", "host=db")

        conn.__exit__.assert_called_once()


@pytest.mark.unit
class TestErrors:
    def test_connection_failure(self):
        with (
            patch(
                "tabula.engines.postgres.psycopg.connect",
                side_effect=psycopg.OperationalError("connection refused"),
            ),
            pytest.raises(NetworkError, match="Connection to PostgreSQL failed"),
        ):
            PostgresExecutor().execute("select 1", "host=192.0.2.1")

    def test_timeout(self):
        conn, _ = _mock_connection(
            execute_effect=[None, psycopg.errors.QueryCanceled("canceling statement")]
        )
        with (
            patch("tabula.engines.postgres.psycopg.connect", return_value=conn),
            pytest.raises(TimeoutError, match="Query timed out after 0.1s"),
        ):
            PostgresExecutor(timeout=0.1).execute("select pg_sleep(5)", "host=db")

    def test_syntax_error(self):
        conn, _ = _mock_connection(
            execute_effect=[None, psycopg.errors.SyntaxError("syntax error at SELECTT")]
        )
        with (
            patch("tabula.engines.postgres.psycopg.connect", return_value=conn),
            pytest.raises(QueryError, match="SQL error"),
        ):
            PostgresExecutor().execute("SELECTT 1", "host=db")

    def test_other_database_error(self):
        conn, _ = _mock_connection(
            execute_effect=[None, psycopg.errors.UndefinedTable("relation does not exist")]
        )
        with (
            patch("tabula.engines.postgres.psycopg.connect", return_value=conn),
            pytest.raises(QueryError, match="Query failed"),
        ):
            PostgresExecutor().execute("select * from nope", "host=db")

    def test_lost_connection(self):
        conn, _ = _mock_connection(
            execute_effect=[None, psycopg.OperationalError("server closed the connection")]
        )
        with (
            patch("tabula.engines.postgres.psycopg.connect", return_value=conn),
            pytest.raises(NetworkError, match="Database error"),
        ):
            PostgresExecutor().execute("select 1", "host=db")


@pytest.mark.integration
def test_live_query_renders():
    result = PostgresExecutor().execute(
        "select 1::int4 as id, 'Ann'::text as name, null::text as note",
        TEST_PG_CONNECTION,
    )
    lines = render_result(result)
    assert lines[1] == "┃ ID ┃ NAME ┃ NOTE ┃"
    assert lines[3] == "┃ 1  ┃ Ann  ┃ NULL ┃"
