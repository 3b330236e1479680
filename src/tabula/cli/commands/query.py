from __future__ import annotations

import sys
from typing import Annotated

import typer

from tabula.cli.commands._shared import (
    build_executor,
    get_resolved_config,
    output_result,
)
from tabula.core.exceptions import ConfigError, InputError
from tabula.core.exit_codes import ExitCode
from tabula.core.query_source import resolve_query_source
from tabula.core.sink import STDOUT_TARGET
from tabula.rendering import get_glyphs


def query_command(
    ctx: typer.Context,
    file: Annotated[
        str | None,
        typer.Argument(help="Query file to execute (SQL, or a JSON filter for mongo)"),
    ] = None,
    execute: Annotated[
        str | None,
        typer.Option("--execute", "-e", help="Execute inline query"),
    ] = None,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", "-t", help="Query timeout in seconds"),
    ] = None,
    database: Annotated[
        str | None,
        typer.Option("--database", "-d", help="MongoDB database name"),
    ] = None,
    collection: Annotated[
        str | None,
        typer.Option("--collection", "-C", help="MongoDB collection name"),
    ] = None,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", min=1, help="Maximum MongoDB documents to fetch"),
    ] = None,
) -> None:
    """Execute a query from file, inline (-e), or stdin and render it as a table."""
    try:
        is_tty = sys.stdin.isatty()
    except (ValueError, AttributeError):
        is_tty = False
    if execute is None and file is None and is_tty:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    try:
        query = resolve_query_source(inline=execute, file_path=file)
    except InputError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(ExitCode.INPUT_ERROR) from exc

    resolved = get_resolved_config(
        ctx,
        timeout=timeout,
        database=database,
        collection=collection,
        limit=limit,
    )
    if not resolved.connection:
        msg = (
            f"No connection string for engine '{resolved.engine}'. "
            "Use --connection, TABULA_CONNECTION, or a profile."
        )
        raise ConfigError(msg)
    get_glyphs(resolved.style)

    executor = build_executor(resolved)
    result = executor.execute(query, resolved.connection)
    output_result(resolved, result)

    if resolved.output != STDOUT_TARGET:
        typer.echo(f"Wrote {result.row_count} rows to {resolved.output}", err=True)
