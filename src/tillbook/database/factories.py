"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from tillbook.database.sqlalchemy_db import SQLAlchemyDatabase


def default_database_path() -> Path:
    """Return ~/.tillbook/tillbook.db, creating the directory if needed."""
    db_dir = Path.home() / ".tillbook"
    db_dir.mkdir(exist_ok=True)
    return db_dir / "tillbook.db"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite-backed database.

    The file is ``database_path`` if given, else TILLBOOK_DB_PATH, else
    :func:`default_database_path`.
    """
    path = database_path or os.environ.get("TILLBOOK_DB_PATH") or default_database_path()
    return SQLAlchemyDatabase(f"sqlite:///{path}")
