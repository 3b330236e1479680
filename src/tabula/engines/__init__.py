"""Query executors for the supported backing stores."""

from tabula.engines.base import EngineRegistry, Executor, registry
from tabula.engines.mongo import MongoExecutor
from tabula.engines.postgres import PostgresExecutor

__all__ = [
    "EngineRegistry",
    "Executor",
    "MongoExecutor",
    "PostgresExecutor",
    "get_executor",
    "registry",
]


def get_executor(engine: str, **options: object) -> Executor:
    """Look up an executor by engine name ("postgres", "mongo")."""
    return registry.get(engine, **options)
