"""
Core data models for Todos.
"""

from todos.models.todo import Todo

__all__ = [
    "Todo",
]
