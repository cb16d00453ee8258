"""
Templated SQL store on a SQLAlchemy AsyncEngine.

Statements are SQLAlchemy `text()` templates with named bind parameters; the
engine supplies the driver (asyncpg or aiosqlite) and its own connection pool.
"""

import logging
from pathlib import Path
from typing import Any, Optional

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from todos.db.migrations import CREATE_MIGRATIONS_TABLE, pending_migrations
from todos.errors import StoreError
from todos.models import Todo
from todos.stores.interface import TodoStore
from todos.stores.sql import NEWEST_FIRST

logger = logging.getLogger(__name__)

LIST_TODOS = {
    dialect: text(f'SELECT "id", "title", "done", "createdAt" FROM "Todo" ORDER BY {order}')
    for dialect, order in NEWEST_FIRST.items()
}
INSERT_TODO = text(
    'INSERT INTO "Todo" ("title", "done") VALUES (:title, false) '
    'RETURNING "id", "title", "done", "createdAt"'
)
UPDATE_DONE = text(
    'UPDATE "Todo" SET "done" = :done WHERE "id" = :id '
    'RETURNING "id", "title", "done", "createdAt"'
)
DELETE_TODO = text('DELETE FROM "Todo" WHERE "id" = :id RETURNING "id"')

_DIALECTS = {"postgresql": "postgres", "sqlite": "sqlite"}


class TemplateTodoStore(TodoStore):
    """Todo store using SQLAlchemy Core text templates."""

    name = "template"

    def __init__(self, url: str, **engine_options: Any):
        """
        Args:
            url: SQLAlchemy async URL (postgresql+asyncpg://... or sqlite+aiosqlite:///...)
            **engine_options: Passed to create_async_engine (pool_size, pool_timeout, ...)
        """
        self.url = url
        self.engine_options = engine_options
        self._engine: Optional[AsyncEngine] = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise StoreError("Store is not connected")
        return self._engine

    async def connect(self) -> None:
        if self._engine is not None:
            return

        url = make_url(self.url)
        if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
            Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)

        self._engine = create_async_engine(url, **self.engine_options)
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            await self._engine.dispose()
            self._engine = None
            raise StoreError.wrap("Failed to connect to database", e) from e

        logger.info(f"SQLAlchemy engine initialized: {url.render_as_string(hide_password=True)}")

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            logger.info("SQLAlchemy engine disposed")

    async def ensure_schema(self) -> list[str]:
        dialect = _DIALECTS.get(self.engine.dialect.name)
        if dialect is None:
            raise StoreError(f"Unsupported dialect: {self.engine.dialect.name}")

        applied = []
        try:
            async with self.engine.begin() as conn:
                await conn.exec_driver_sql(CREATE_MIGRATIONS_TABLE)
                result = await conn.execute(text("SELECT version FROM schema_migrations"))
                versions = {row[0] for row in result}

            for migration in pending_migrations(dialect, versions):
                logger.info(f"Running migration: {migration.name}")
                async with self.engine.begin() as conn:
                    for statement in migration.statements:
                        await conn.exec_driver_sql(statement)
                    await conn.execute(
                        text("INSERT INTO schema_migrations (version, name) VALUES (:version, :name)"),
                        {"version": migration.version, "name": migration.name},
                    )
                applied.append(migration.name)
        except Exception as e:
            logger.error(f"Migration failed: {e}")
            raise StoreError.wrap("Failed to migrate database", e) from e

        return applied

    async def _one(self, statement, params: dict) -> Optional[dict]:
        async with self.engine.begin() as conn:
            result = await conn.execute(statement, params)
            row = result.mappings().first()
        return dict(row) if row is not None else None

    async def list_all(self) -> list[Todo]:
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(LIST_TODOS[_DIALECTS[self.engine.dialect.name]])
                rows = result.mappings().all()
        except Exception as e:
            raise StoreError.wrap("Failed to fetch todos", e) from e
        return [Todo.from_dict(dict(row)) for row in rows]

    async def insert(self, title: str) -> Todo:
        try:
            row = await self._one(INSERT_TODO, {"title": title})
        except Exception as e:
            raise StoreError.wrap("Failed to create todo", e) from e

        todo = Todo.from_dict(row)
        logger.info(f"Created todo: {todo.id} - {todo.title}")
        return todo

    async def update_done(self, todo_id: str, done: bool) -> Todo | None:
        try:
            row = await self._one(UPDATE_DONE, {"done": done, "id": todo_id})
        except Exception as e:
            raise StoreError.wrap("Failed to update todo", e) from e

        if row is None:
            return None
        logger.info(f"Updated todo: {todo_id} done={done}")
        return Todo.from_dict(row)

    async def delete_by_id(self, todo_id: str) -> bool:
        try:
            row = await self._one(DELETE_TODO, {"id": todo_id})
        except Exception as e:
            raise StoreError.wrap("Failed to delete todo", e) from e

        if row is None:
            return False
        logger.info(f"Deleted todo: {todo_id}")
        return True
