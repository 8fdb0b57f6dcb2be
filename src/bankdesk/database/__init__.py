"""Database layer for bankdesk application."""

from bankdesk.database.base import AccountStore, Database, TransactionLog, UnitOfWork
from bankdesk.database.factories import create_database, create_sqlite_database

__all__ = [
    "AccountStore",
    "Database",
    "TransactionLog",
    "UnitOfWork",
    "create_database",
    "create_sqlite_database",
]
