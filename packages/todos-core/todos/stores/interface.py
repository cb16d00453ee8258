"""
Data-access contract for todos.

Every variant (raw SQL over a pool, SQLAlchemy text templates, Supabase REST)
implements the same four single-statement operations. Not-found is an outcome
(None / False); anything the backing library raises becomes a StoreError.
"""

from abc import ABC, abstractmethod

from todos.models import Todo


class TodoStore(ABC):
    """Abstract base class for todo stores."""

    #: Short name used in config (store.backend)
    name: str = ""

    @abstractmethod
    async def connect(self) -> None:
        """Acquire the process-wide resource (pool, engine or HTTP client)."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release everything acquired by connect()."""
        pass

    async def ensure_schema(self) -> list[str]:
        """
        Apply pending migrations.

        Returns:
            Names of the migrations applied. Default implementation does nothing.
        """
        return []

    @abstractmethod
    async def list_all(self) -> list[Todo]:
        """All todos, newest first."""
        pass

    @abstractmethod
    async def insert(self, title: str) -> Todo:
        """Insert a todo with done=False; the store assigns id and createdAt."""
        pass

    @abstractmethod
    async def update_done(self, todo_id: str, done: bool) -> Todo | None:
        """
        Set `done` on one todo.

        Returns:
            The updated Todo, or None if no row matched
        """
        pass

    @abstractmethod
    async def delete_by_id(self, todo_id: str) -> bool:
        """
        Delete one todo.

        Returns:
            True if a row was removed, False if none matched
        """
        pass
