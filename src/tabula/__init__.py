"""tabula - render query results from PostgreSQL or MongoDB as box-drawn tables."""

from tabula.__about__ import __version__

__all__ = ["__version__"]
