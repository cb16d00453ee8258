"""
Todos HTTP API and command line.
"""

from todos_api.app import create_app

__all__ = [
    "create_app",
]
