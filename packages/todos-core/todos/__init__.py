"""
Todos Core Library

Single-table todo list with interchangeable PostgreSQL, SQLite and Supabase stores.
"""

__version__ = "0.1.0"

from todos.config import TodosConfig, load_config
from todos.errors import NotFoundError, StoreError, TodoError, ValidationError
from todos.models import Todo
from todos.services import TodoService
from todos.stores import TodoStore, create_store, init_store

__all__ = [
    "load_config",
    "TodosConfig",
    "Todo",
    "TodoService",
    "TodoStore",
    "create_store",
    "init_store",
    "TodoError",
    "ValidationError",
    "NotFoundError",
    "StoreError",
]
