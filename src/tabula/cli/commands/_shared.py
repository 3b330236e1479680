"""Shared CLI plumbing for command modules.

Config resolution, executor creation and output helpers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tabula.cli.output import get_formatter, write_output
from tabula.core.config import load_config, resolve_config
from tabula.engines import get_executor

if TYPE_CHECKING:
    import typer

    from tabula.core.config import ResolvedConfig
    from tabula.core.models import QueryResult
    from tabula.engines import Executor

_GLOBAL_OVERRIDES = ("engine", "connection", "output", "style")


def get_resolved_config(ctx: typer.Context, **overrides: Any) -> ResolvedConfig:
    obj = ctx.ensure_object(dict)
    config = load_config(obj.get("config_file"))

    cli_overrides: dict[str, Any] = {}
    for key in _GLOBAL_OVERRIDES:
        val = obj.get(key)
        if val is not None:
            cli_overrides[key] = val
    for key, val in overrides.items():
        if val is not None:
            cli_overrides[key] = val

    return resolve_config(
        config,
        profile_name=obj.get("profile"),
        **cli_overrides,
    )


def build_executor(resolved: ResolvedConfig) -> Executor:
    return get_executor(resolved.engine, **resolved.engine_options())


def output_result(resolved: ResolvedConfig, result: QueryResult) -> int:
    formatter = get_formatter(resolved.style)
    return write_output(formatter, result, resolved.output)


def mask_connection(value: str | None) -> str:
    """Hide credentials in a connection string for display."""
    if value is None:
        return "not set"
    if "://" in value:
        scheme, rest = value.split("://", 1)
        if "@" in rest:
            return f"{scheme}://***@{rest.rsplit('@', 1)[1]}"
        return value
    parts = []
    for part in value.split():
        key, sep, _ = part.partition("=")
        if sep and key.lower() == "password":
            parts.append(f"{key}=***")
        else:
            parts.append(part)
    return " ".join(parts)
