"""Tests for config CLI commands."""

import pytest

from tabula.cli.commands._shared import mask_connection
from tabula.cli.main import app

CONFIG_TOML = """\
default_profile = "local"

[profiles.local]
engine = "postgres"
connection = "host=localhost user=admin password=s3cret dbname=db_dummy"

[profiles.docs]
engine = "mongo"
connection = "mongodb://reader:pw@mongo.example:27017"
database = "db_dummy"
collection = "dummies"
"""


@pytest.fixture
def config_path(temp_dir):
    path = temp_dir / "config.toml"
    path.write_text(CONFIG_TOML)
    return path


@pytest.mark.unit
class TestMaskConnection:
    def test_conninfo_password(self):
        assert (
            mask_connection("host=db user=u password=secret dbname=x")
            == "host=db user=u password=*** dbname=x"
        )

    def test_url_credentials(self):
        assert (
            mask_connection("mongodb://reader:pw@mongo.example:27017/db")
            == "mongodb://***@mongo.example:27017/db"
        )

    def test_url_without_credentials(self):
        assert mask_connection("mongodb://localhost") == "mongodb://localhost"

    def test_not_set(self):
        assert mask_connection(None) == "not set"


@pytest.mark.unit
class TestConfigShow:
    def test_shows_default_profile(self, runner, config_path):
        result = runner.invoke(app, ["--config", str(config_path), "config", "show"])
        assert result.exit_code == 0, result.output
        assert "engine: postgres (profile: local)" in result.stdout
        assert "password=***" in result.stdout
        assert "s3cret" not in result.stdout
        assert "Active Profile: local" in result.stdout
        assert f"Config File: {config_path}" in result.stdout

    def test_cli_flags_win(self, runner, config_path):
        result = runner.invoke(
            app,
            ["--config", str(config_path), "-E", "mongo", "-o", "-", "config", "show"],
        )
        assert result.exit_code == 0
        assert "engine: mongo (cli: --engine)" in result.stdout
        assert "output: - (cli: --output)" in result.stdout

    def test_without_config_file(self, runner, temp_dir):
        result = runner.invoke(
            app, ["--config", str(temp_dir / "missing.toml"), "config", "show"]
        )
        assert result.exit_code == 0
        assert "connection: not set (default)" in result.stdout
        assert "Active Profile: none" in result.stdout


@pytest.mark.unit
class TestConfigProfiles:
    def test_lists_profiles(self, runner, config_path):
        result = runner.invoke(app, ["--config", str(config_path), "config", "profiles"])
        assert result.exit_code == 0
        assert "* local (active)" in result.stdout
        assert "  docs" in result.stdout
        assert "collection: dummies" in result.stdout
        assert "pw@" not in result.stdout

    def test_no_profiles(self, runner, temp_dir):
        result = runner.invoke(
            app, ["--config", str(temp_dir / "missing.toml"), "config", "profiles"]
        )
        assert result.exit_code == 0
        assert "No profiles configured." in result.stdout

    def test_config_without_subcommand_shows_help(self, runner):
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "show" in result.stdout
