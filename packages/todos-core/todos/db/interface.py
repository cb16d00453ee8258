"""
Abstract database adapter interface.

Thin async wrapper over a driver's pool or connection. Queries are written
with PostgreSQL placeholders ($1, $2) and rewritten per adapter.
"""

import re
from abc import ABC, abstractmethod


class DatabaseAdapter(ABC):
    """
    Abstract base class for database adapters.

    Implementations must support:
    - Lifecycle (connect, close)
    - Basic statement execution (execute, fetch, fetchrow)
    - Placeholder rewriting (placeholder_style, format_query)
    """

    #: Directory name under todos/db/migrations holding this dialect's files
    dialect: str = ""

    @abstractmethod
    async def connect(self) -> None:
        """Initialize connection/pool."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close connection/pool."""
        pass

    @abstractmethod
    async def execute(self, query: str, *args) -> str:
        """
        Execute a query and return status.

        Args:
            query: SQL query with $1, $2 placeholders
            *args: Query parameters

        Returns:
            Status string (e.g., "INSERT 0 1")
        """
        pass

    @abstractmethod
    async def fetch(self, query: str, *args) -> list[dict]:
        """
        Fetch multiple rows as list of dicts.

        Also used for INSERT/UPDATE/DELETE ... RETURNING statements.
        """
        pass

    @abstractmethod
    async def fetchrow(self, query: str, *args) -> dict | None:
        """
        Fetch single row as dict.

        Returns:
            Row dict or None if no results
        """
        pass

    @property
    @abstractmethod
    def placeholder_style(self) -> str:
        """
        Return the placeholder style for this adapter.

        Returns:
            "dollar" for PostgreSQL ($1, $2, ...)
            "qmark" for SQLite (?1, ?2, ...)
        """
        pass

    def format_query(self, query: str) -> str:
        """
        Convert query placeholders to the adapter's style.

        Input uses $1, $2 style (PostgreSQL). For SQLite the numbered
        form ?1, ?2 is used so repeated or reordered parameters still bind.
        """
        if self.placeholder_style == "dollar":
            return query
        return re.sub(r"\$(\d+)", r"?\1", query)
