"""Exception hierarchy for tabula.

All exceptions carry an exit_code for CLI return value mapping.
Exit codes are defined in exit_codes.py.
"""

from tabula.core.exit_codes import ExitCode


class TabulaError(Exception):
    """Base exception for all tabula errors."""

    exit_code: int = ExitCode.GENERAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class QueryError(TabulaError):
    """Backend rejected the query (syntax error, bad filter, server error)."""


class UnknownEngineError(TabulaError):
    """Engine name is not registered."""

    exit_code: int = ExitCode.USAGE_ERROR


class NetworkError(TabulaError):
    """Connection failures, unreachable host."""

    exit_code: int = ExitCode.NETWORK_ERROR


class TimeoutError(NetworkError):
    """Query timeout, connection timeout."""

    exit_code: int = ExitCode.TIMEOUT


class InputError(TabulaError):
    """File not found, invalid parameters."""

    exit_code: int = ExitCode.INPUT_ERROR


class EmptyResultSetError(InputError):
    """Result set has no rows or no columns to render."""

    exit_code: int = ExitCode.EMPTY_RESULT


class OutputError(TabulaError):
    """Output destination could not accept the rendered table."""

    exit_code: int = ExitCode.OUTPUT_ERROR


class ConfigError(TabulaError):
    """Malformed config, missing profile."""

    exit_code: int = ExitCode.CONFIG_ERROR
