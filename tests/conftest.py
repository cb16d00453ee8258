"""
Pytest configuration and fixtures for todos tests.
"""

import pytest
import sys
from pathlib import Path

# Configure pytest-asyncio
pytest_plugins = ["pytest_asyncio"]

# Add packages to path for testing
packages_dir = Path(__file__).parent.parent / "packages"
sys.path.insert(0, str(packages_dir / "todos-core"))
sys.path.insert(0, str(packages_dir / "todos-api"))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer environment variables from leaking into config tests."""
    for name in (
        "TODOS_DATABASE_URL",
        "POSTGRES_URL",
        "TODOS_STORE_BACKEND",
        "SUPABASE_URL",
        "SUPABASE_ANON_KEY",
        "TODOS_LOG_LEVEL",
        "TODOS_EXPOSE_ERROR_DETAILS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sqlite_config(tmp_path):
    """TodosConfig pointing at a temporary SQLite file."""
    from todos.config import TodosConfig

    config = TodosConfig()
    config.database.sqlite_path = str(tmp_path / "todos.db")
    return config


@pytest.fixture
async def sqlite_adapter(tmp_path):
    """Connected SQLite adapter with the Todo table migrated."""
    from todos.db.migrations import run_migrations
    from todos.db.sqlite import SQLiteAdapter

    adapter = SQLiteAdapter(str(tmp_path / "test.db"))
    await adapter.connect()
    await run_migrations(adapter)

    yield adapter

    await adapter.close()


@pytest.fixture(params=["sql", "template"])
async def store(request, tmp_path):
    """Each SQL-backed store variant in turn, migrated and connected."""
    from todos.db.sqlite import SQLiteAdapter
    from todos.stores.sql import SqlTodoStore
    from todos.stores.template import TemplateTodoStore

    if request.param == "sql":
        todo_store = SqlTodoStore(SQLiteAdapter(str(tmp_path / "sql.db")))
    else:
        todo_store = TemplateTodoStore(f"sqlite+aiosqlite:///{tmp_path / 'template.db'}")

    await todo_store.connect()
    await todo_store.ensure_schema()

    yield todo_store

    await todo_store.close()
