"""Database factory functions for creating store instances."""

import os
from pathlib import Path
from typing import Optional

from commtrack.database.memory import InMemoryDatabase
from commtrack.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite-backed store.

    Args:
        database_path: Path to SQLite database file. If None, checks COMMTRACK_DB_PATH
            environment variable, then defaults to ~/.commtrack/commtrack.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("COMMTRACK_DB_PATH")

    if database_path is None:
        db_dir = Path.home() / ".commtrack"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "commtrack.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)


def create_memory_database() -> InMemoryDatabase:
    """Create an in-memory store whose contents vanish with the process."""
    return InMemoryDatabase()
