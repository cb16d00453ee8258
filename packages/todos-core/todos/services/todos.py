"""
Todo Service.

Validates request input and drives a TodoStore. Validation failures are raised
before the store is touched; store faults propagate as StoreError.
"""

import logging
from typing import Any

from todos.errors import NotFoundError, ValidationError
from todos.models import Todo
from todos.stores.interface import TodoStore

logger = logging.getLogger(__name__)


class TodoService:
    """
    Service for managing todos.

    Provides list/create/update/delete over any TodoStore variant.
    """

    def __init__(self, store: TodoStore):
        """
        Initialize todo service.

        Args:
            store: Connected TodoStore
        """
        self.store = store

    async def list(self) -> list[Todo]:
        """All todos, newest first."""
        return await self.store.list_all()

    async def create(self, title: Any) -> Todo:
        """
        Create a new todo.

        Args:
            title: Todo title; surrounding whitespace is trimmed

        Returns:
            Created Todo

        Raises:
            ValidationError: If the title is missing or blank
        """
        if not isinstance(title, str) or not title.strip():
            raise ValidationError("Title is required")

        return await self.store.insert(title.strip())

    async def set_done(self, todo_id: Any, done: Any) -> Todo:
        """
        Set the completion flag of a todo to the given value.

        The caller decides the new value (e.g. the negation of the current one).

        Raises:
            ValidationError: If the id is missing or done is not a boolean
            NotFoundError: If no todo has this id
        """
        todo_id = _require_id(todo_id)
        if not isinstance(done, bool):
            raise ValidationError("Done must be a boolean")

        todo = await self.store.update_done(todo_id, done)
        if todo is None:
            raise NotFoundError("Todo not found")
        return todo

    async def delete(self, todo_id: Any) -> None:
        """
        Delete a todo.

        Raises:
            ValidationError: If the id is missing
            NotFoundError: If no todo has this id
        """
        todo_id = _require_id(todo_id)

        if not await self.store.delete_by_id(todo_id):
            raise NotFoundError("Todo not found")


def _require_id(value: Any) -> str:
    # bool is an int subclass but never a valid id; 0 counts as missing
    if isinstance(value, bool) or not isinstance(value, (str, int)) or value == 0:
        raise ValidationError("ID is required")
    todo_id = str(value).strip()
    if not todo_id:
        raise ValidationError("ID is required")
    return todo_id
