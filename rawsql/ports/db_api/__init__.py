"""DB-API adapter and dialect exports."""

from .async_database import AsyncDatabase
from .dialects import Dialect, MSSQLDialect, MySQLDialect, PostgresDialect, SQLiteDialect

__all__ = [
    "AsyncDatabase",
    "Dialect",
    "MSSQLDialect",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
]
