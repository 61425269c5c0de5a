"""Database layer for profitfirst application."""

from profitfirst.database.base import Database
from profitfirst.database.factories import create_local_cache, create_sqlite_database
from profitfirst.database.local_cache import LocalCache

__all__ = ["Database", "LocalCache", "create_local_cache", "create_sqlite_database"]
