"""
Raw SQL store over a pooled DatabaseAdapter (asyncpg or aiosqlite).
"""

import logging

from todos.db.interface import DatabaseAdapter
from todos.db.migrations import run_migrations
from todos.errors import StoreError
from todos.models import Todo
from todos.stores.interface import TodoStore

logger = logging.getLogger(__name__)

COLUMNS = '"id", "title", "done", "createdAt"'

# SQLite timestamps only carry milliseconds; rowid breaks ties in insert order
NEWEST_FIRST = {
    "postgres": '"createdAt" DESC',
    "sqlite": '"createdAt" DESC, rowid DESC',
}


class SqlTodoStore(TodoStore):
    """
    Todo store issuing parameterized SQL through a DatabaseAdapter.

    The adapter owns the pool; this store only borrows it per statement.
    """

    name = "sql"

    def __init__(self, adapter: DatabaseAdapter):
        self.adapter = adapter

    async def connect(self) -> None:
        try:
            await self.adapter.connect()
        except Exception as e:
            raise StoreError.wrap("Failed to connect to database", e) from e

    async def close(self) -> None:
        await self.adapter.close()

    async def ensure_schema(self) -> list[str]:
        try:
            return await run_migrations(self.adapter)
        except Exception as e:
            raise StoreError.wrap("Failed to migrate database", e) from e

    async def list_all(self) -> list[Todo]:
        try:
            rows = await self.adapter.fetch(
                f'SELECT {COLUMNS} FROM "Todo" ORDER BY {NEWEST_FIRST[self.adapter.dialect]}'
            )
        except Exception as e:
            raise StoreError.wrap("Failed to fetch todos", e) from e
        return [Todo.from_dict(row) for row in rows]

    async def insert(self, title: str) -> Todo:
        try:
            row = await self.adapter.fetchrow(
                f'INSERT INTO "Todo" ("title", "done") VALUES ($1, false) RETURNING {COLUMNS}',
                title,
            )
        except Exception as e:
            raise StoreError.wrap("Failed to create todo", e) from e

        todo = Todo.from_dict(row)
        logger.info(f"Created todo: {todo.id} - {todo.title}")
        return todo

    async def update_done(self, todo_id: str, done: bool) -> Todo | None:
        try:
            row = await self.adapter.fetchrow(
                f'UPDATE "Todo" SET "done" = $1 WHERE "id" = $2 RETURNING {COLUMNS}',
                done, todo_id,
            )
        except Exception as e:
            raise StoreError.wrap("Failed to update todo", e) from e

        if row is None:
            return None
        logger.info(f"Updated todo: {todo_id} done={done}")
        return Todo.from_dict(row)

    async def delete_by_id(self, todo_id: str) -> bool:
        try:
            row = await self.adapter.fetchrow(
                'DELETE FROM "Todo" WHERE "id" = $1 RETURNING "id"',
                todo_id,
            )
        except Exception as e:
            raise StoreError.wrap("Failed to delete todo", e) from e

        if row is None:
            return False
        logger.info(f"Deleted todo: {todo_id}")
        return True
