"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from profitfirst.database.local_cache import LocalCache
from profitfirst.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks PROFITFIRST_DB_PATH
            environment variable, then defaults to ~/.profitfirst/profitfirst.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("PROFITFIRST_DB_PATH")

    if database_path is None:
        db_dir = Path.home() / ".profitfirst"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "profitfirst.db")

    return SQLAlchemyDatabase(f"sqlite:///{database_path}")


def create_local_cache(cache_path: Optional[str] = None) -> LocalCache:
    """Create the on-disk key-value cache.

    Args:
        cache_path: Path to the JSON cache file. If None, checks PROFITFIRST_CACHE_PATH
            environment variable, then defaults to ~/.profitfirst/local-cache.json
    """
    if cache_path is None:
        cache_path = os.environ.get("PROFITFIRST_CACHE_PATH")

    if cache_path is None:
        cache_dir = Path.home() / ".profitfirst"
        cache_dir.mkdir(exist_ok=True)
        cache_path = str(cache_dir / "local-cache.json")

    return LocalCache(cache_path)
