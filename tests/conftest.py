"""Shared test fixtures for tabula."""

from pathlib import Path
from tempfile import TemporaryDirectory

import pytest
from typer.testing import CliRunner

from tabula.cli.main import app


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the caller's TABULA_* settings out of every test."""
    for var in (
        "TABULA_PROFILE",
        "TABULA_ENGINE",
        "TABULA_CONNECTION",
        "TABULA_OUTPUT",
        "TABULA_SENTRY_DSN",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_runner(runner):
    """Invoke the CLI app with the given arguments."""

    def invoke(*args: str, **kwargs):
        return runner.invoke(app, list(args), **kwargs)

    return invoke


@pytest.fixture
def temp_dir():
    """Temporary directory for test files."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
