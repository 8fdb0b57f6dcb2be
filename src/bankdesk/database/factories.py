"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from bankdesk.database.sqlalchemy_db import SQLAlchemyDatabase


def create_database(database_url: str, busy_timeout: float = 30.0) -> SQLAlchemyDatabase:
    """Create a database instance for any SQLAlchemy URL."""
    return SQLAlchemyDatabase(database_url, busy_timeout=busy_timeout)


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks BANKDESK_DB_PATH
            environment variable, then defaults to ~/.bankdesk/bankdesk.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("BANKDESK_DB_PATH")

    if database_path is None:
        # Default to ~/.bankdesk/bankdesk.db
        home = Path.home()
        db_dir = home / ".bankdesk"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "bankdesk.db")

    db = create_database(f"sqlite:///{database_path}")
    db.database_path = database_path
    return db
