"""
pgdock - PostgreSQL database lifecycle commands, natively or in throwaway containers
"""

__version__ = "0.1.0"

from .core import PgDock
from .errors import DatabaseNotFoundError, PgDockError
from .models import ConnectionConfig

__all__ = ["PgDock", "ConnectionConfig", "PgDockError", "DatabaseNotFoundError"]
