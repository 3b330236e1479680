"""tabula main entry point and command registration."""

from __future__ import annotations

from pathlib import Path  # noqa: TC003
from typing import Annotated

import sentry_sdk
import typer

from tabula.__about__ import __version__
from tabula.cli.commands.config import config_app
from tabula.cli.commands.query import query_command
from tabula.cli.output import TableStyle  # noqa: TC001
from tabula.core.exceptions import TabulaError
from tabula.core.logging import setup_logging
from tabula.core.monitoring import setup_sentry
from tabula.engines import registry

app = typer.Typer(
    help="tabula - run a query against PostgreSQL or MongoDB and render a box-drawn table",
    no_args_is_help=True,
)

app.add_typer(config_app, name="config")
app.command("query")(query_command)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"tabula {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable verbose logging"),
    ] = False,
    profile: Annotated[
        str | None,
        typer.Option("--profile", "-P", help="Named engine profile"),
    ] = None,
    engine: Annotated[
        str | None,
        typer.Option("--engine", "-E", help="Backing store: postgres|mongo"),
    ] = None,
    connection: Annotated[
        str | None,
        typer.Option("--connection", "-c", help="Connection string for the engine"),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config file"),
    ] = None,
    output: Annotated[
        str | None,
        typer.Option("--output", "-o", help="Output file, '-' for stdout"),
    ] = None,
    style: Annotated[
        TableStyle | None,
        typer.Option("--style", help="Box style: heavy|light|ascii"),
    ] = None,
) -> None:
    """tabula - render query results as box-drawn tables."""
    setup_logging(verbose)
    setup_sentry()

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["profile"] = profile
    ctx.obj["engine"] = engine
    ctx.obj["connection"] = connection
    ctx.obj["config_file"] = config_file
    ctx.obj["output"] = output
    ctx.obj["style"] = style.value if style else None


@app.command("engines")
def engines_command() -> None:
    """List the available query engines."""
    for name in registry.available:
        typer.echo(name)


def run() -> None:
    """Entry point with global error handling."""
    try:
        with sentry_sdk.start_transaction(op="cli", name="tabula"):
            app()
    except TabulaError as e:
        sentry_sdk.capture_exception(e)
        typer.echo(f"Error: {e.message}", err=True)
        raise SystemExit(e.exit_code) from None
    except SystemExit:
        raise
    except KeyboardInterrupt:
        raise SystemExit(130) from None
    except Exception as e:
        sentry_sdk.capture_exception(e)
        typer.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from None
