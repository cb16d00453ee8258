"""
Business logic services for Todos.
"""

from todos.services.todos import TodoService

__all__ = [
    "TodoService",
]
