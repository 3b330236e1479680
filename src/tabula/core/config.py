"""Configuration management for tabula.

Handles TOML config files, environment variables, named profiles,
and configuration precedence resolution.

Precedence order (highest to lowest):
1. CLI flags (--engine, --connection, --output, ...)
2. Environment variables (TABULA_ENGINE, TABULA_CONNECTION, TABULA_OUTPUT)
3. Named profile (--profile or TABULA_PROFILE env var)
4. Config file defaults
5. Built-in defaults
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, field_validator

from tabula.core.exceptions import ConfigError

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "tabula" / "config.toml"
DEFAULT_OUTPUT = "tabula.out"
DEFAULT_STYLE = "heavy"
DEFAULT_TIMEOUT = 30.0

_ENV_VARS: dict[str, str] = {
    "TABULA_ENGINE": "engine",
    "TABULA_CONNECTION": "connection",
    "TABULA_OUTPUT": "output",
}

_BUILTIN_DEFAULTS: dict[str, Any] = {
    "engine": "postgres",
    "connection": None,
    "database": None,
    "collection": None,
    "limit": None,
    "timeout": DEFAULT_TIMEOUT,
    "output": DEFAULT_OUTPUT,
    "style": DEFAULT_STYLE,
}


class EngineProfile(BaseModel):
    engine: str = "postgres"
    connection: str | None = None
    database: str | None = None
    collection: str | None = None
    limit: int | None = None
    timeout: float | None = None

    @field_validator("limit")
    @classmethod
    def validate_limit(cls, v: int | None) -> int | None:
        if v is not None and v < 1:
            msg = f"Invalid limit: {v}. Must be a positive integer"
            raise ValueError(msg)
        return v


class AppConfig(BaseModel):
    default_timeout: float = DEFAULT_TIMEOUT
    default_output: str = DEFAULT_OUTPUT
    default_style: str = DEFAULT_STYLE
    default_profile: str | None = None
    profiles: dict[str, EngineProfile] = {}


class ResolvedConfig(BaseModel):
    engine: str = "postgres"
    connection: str | None = None
    database: str | None = None
    collection: str | None = None
    limit: int | None = None
    timeout: float = DEFAULT_TIMEOUT
    output: str = DEFAULT_OUTPUT
    style: str = DEFAULT_STYLE
    active_profile: str | None = None
    sources: dict[str, str] = {}

    def engine_options(self) -> dict[str, Any]:
        """Constructor options for the selected engine's executor."""
        options: dict[str, Any] = {"timeout": self.timeout}
        if self.engine == "mongo":
            options["database"] = self.database
            options["collection"] = self.collection
            options["limit"] = self.limit
        return options


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from TOML file.

    Returns default AppConfig if file doesn't exist.
    Raises ConfigError on malformed TOML or invalid config.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return AppConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Malformed TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return AppConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid configuration in {config_path}: {e}"
        raise ConfigError(msg) from e


def resolve_config(
    config: AppConfig,
    profile_name: str | None = None,
    **cli_overrides: Any,
) -> ResolvedConfig:
    """Resolve configuration using precedence chain.

    CLI > env > profile > config defaults > built-in defaults.
    """
    sources: dict[str, str] = {}
    resolved: dict[str, Any] = {}

    # Layer 1: Built-in defaults
    resolved.update(_BUILTIN_DEFAULTS)
    for key in resolved:
        sources[key] = "default"

    # Layer 2: Config file global defaults
    if config.default_timeout != DEFAULT_TIMEOUT:
        resolved["timeout"] = config.default_timeout
        sources["timeout"] = "config"
    if config.default_output != DEFAULT_OUTPUT:
        resolved["output"] = config.default_output
        sources["output"] = "config"
    if config.default_style != DEFAULT_STYLE:
        resolved["style"] = config.default_style
        sources["style"] = "config"

    # Layer 3: Named profile
    effective_profile = profile_name
    if not effective_profile:
        effective_profile = os.environ.get("TABULA_PROFILE")
    if not effective_profile:
        effective_profile = config.default_profile

    if effective_profile:
        if effective_profile not in config.profiles:
            available = (
                ", ".join(sorted(config.profiles.keys())) if config.profiles else "none"
            )
            msg = f"Unknown profile: '{effective_profile}'. Available profiles: {available}"
            raise ConfigError(msg)
        profile = config.profiles[effective_profile]
        for key in profile.model_fields_set:
            value = getattr(profile, key)
            if key in resolved and value is not None:
                resolved[key] = value
                sources[key] = f"profile: {effective_profile}"

    # Layer 4: Environment variables
    for env_var, field_name in _ENV_VARS.items():
        value = os.environ.get(env_var)
        if value is not None:
            resolved[field_name] = value
            sources[field_name] = f"env: {env_var}"

    # Layer 5: CLI flags (highest priority)
    for cli_name in (
        "engine",
        "connection",
        "database",
        "collection",
        "limit",
        "timeout",
        "output",
        "style",
    ):
        value = cli_overrides.get(cli_name)
        if value is not None:
            resolved[cli_name] = value
            sources[cli_name] = f"cli: --{cli_name}"

    resolved["active_profile"] = effective_profile
    resolved["sources"] = sources
    return ResolvedConfig(**resolved)
