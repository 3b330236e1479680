"""Executor protocol and engine registry."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from tabula.core.exceptions import UnknownEngineError

if TYPE_CHECKING:
    from collections.abc import Callable

    from tabula.core.models import QueryResult


@runtime_checkable
class Executor(Protocol):
    """Protocol for query executors.

    An executor runs one query against its backend and returns the fully
    materialized result.
    """

    def execute(self, query: str, connection: str) -> QueryResult:
        """Run query over the given connection string."""
        ...


class EngineRegistry:
    """Registry for looking up executors by engine name."""

    def __init__(self) -> None:
        self._engines: dict[str, Callable[..., Executor]] = {}

    def register(self, name: str, factory: Callable[..., Executor]) -> None:
        self._engines[name] = factory

    def get(self, name: str, **options: Any) -> Executor:
        """Return an executor instance by engine name.

        Raises UnknownEngineError if the engine is not registered.
        """
        if name not in self._engines:
            available = ", ".join(sorted(self._engines))
            msg = f"Unknown engine {name!r}. Available: {available}"
            raise UnknownEngineError(msg)
        return self._engines[name](**options)

    @property
    def available(self) -> list[str]:
        return sorted(self._engines)


# Global registry instance populated by engine modules.
registry = EngineRegistry()
