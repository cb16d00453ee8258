"""
Interchangeable todo stores: raw SQL, SQLAlchemy templates, Supabase REST.
"""

from todos.stores.factory import create_store, init_store
from todos.stores.interface import TodoStore

__all__ = [
    "TodoStore",
    "create_store",
    "init_store",
]
