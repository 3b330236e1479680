"""Output formatters for tabula."""

from tabula.formatters.base import Formatter
from tabula.formatters.table import BoxTableFormatter

__all__ = ["BoxTableFormatter", "Formatter"]
