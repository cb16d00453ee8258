"""
Database abstraction layer supporting PostgreSQL and SQLite.
"""

from todos.db.factory import create_adapter
from todos.db.interface import DatabaseAdapter
from todos.db.migrations import run_migrations

__all__ = [
    "DatabaseAdapter",
    "create_adapter",
    "run_migrations",
]
