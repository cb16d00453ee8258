"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

from fastapi import Request

from todos.services import TodoService
from todos.stores import TodoStore


def get_store(request: Request) -> TodoStore:
    """
    Return the process-wide store opened by the app lifespan.
    """
    return request.app.state.store


def get_todo_service(request: Request) -> TodoService:
    return TodoService(get_store(request))
