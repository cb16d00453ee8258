"""
SQLite database adapter using aiosqlite.

Local stand-in for the PostgreSQL pool: one connection in autocommit mode,
so every statement is its own transaction just like a pooled PostgreSQL call.
Requires SQLite 3.35+ for RETURNING.
"""

import logging
from pathlib import Path
from typing import Optional, List

import aiosqlite

from todos.db.interface import DatabaseAdapter

logger = logging.getLogger(__name__)


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite adapter.

    Uses aiosqlite for async database operations.
    Automatically creates the database file and parent directories.
    """

    dialect = "sqlite"

    def __init__(self, db_path: str = "~/.todos/todos.db"):
        """
        Initialize SQLite adapter.

        Args:
            db_path: Path to SQLite database file.
                    Supports ~ expansion for home directory.
        """
        self.db_path = Path(db_path).expanduser()
        self._conn: Optional[aiosqlite.Connection] = None

    async def connect(self) -> None:
        """Initialize database connection and create file if needed."""
        if self._conn is not None:
            return

        # Ensure parent directory exists
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        # isolation_level=None: autocommit, no implicit transactions
        self._conn = await aiosqlite.connect(str(self.db_path), isolation_level=None)

        # Use WAL mode for better concurrent access
        await self._conn.execute("PRAGMA journal_mode = WAL")

        # Row factory to return dicts
        self._conn.row_factory = aiosqlite.Row

        logger.info(f"SQLite database connected: {self.db_path}")

    async def close(self) -> None:
        """Close database connection."""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            logger.info("SQLite connection closed")

    async def _get_conn(self) -> aiosqlite.Connection:
        """Get or create connection."""
        if self._conn is None:
            await self.connect()
        return self._conn

    async def _fetchall(self, query: str, args: tuple) -> list:
        conn = await self._get_conn()
        query = self.format_query(query)
        try:
            # Drain the cursor so RETURNING statements complete
            async with conn.execute(query, args) as cursor:
                return await cursor.fetchall()
        except Exception as e:
            logger.error(f"Database query error: {e} | {query.strip()[:200]}")
            raise

    async def execute(self, query: str, *args) -> str:
        """Execute query and return status."""
        conn = await self._get_conn()
        query = self.format_query(query)

        try:
            async with conn.execute(query, args) as cursor:
                rowcount = cursor.rowcount
        except Exception as e:
            logger.error(f"Database query error: {e} | {query.strip()[:200]}")
            raise

        # Return a status string similar to PostgreSQL
        verb = query.strip().split(None, 1)[0].upper() if query.strip() else ""
        if verb == "INSERT":
            return f"INSERT 0 {rowcount}"
        elif verb in ("UPDATE", "DELETE"):
            return f"{verb} {rowcount}"
        return "OK"

    async def fetch(self, query: str, *args) -> List[dict]:
        """Fetch rows as list of dicts."""
        rows = await self._fetchall(query, args)
        return [dict(row) for row in rows]

    async def fetchrow(self, query: str, *args) -> Optional[dict]:
        """Fetch single row as dict."""
        rows = await self._fetchall(query, args)
        return dict(rows[0]) if rows else None

    @property
    def placeholder_style(self) -> str:
        """SQLite uses ?1, ?2 style placeholders."""
        return "qmark"
