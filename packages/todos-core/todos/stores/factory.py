"""
Todo store factory.

Picks one data-access variant from `store.backend`. The caller owns the store
for the lifetime of the process.
"""

import logging

from todos.stores.interface import TodoStore

logger = logging.getLogger(__name__)


def create_store(config=None) -> TodoStore:
    """
    Create the todo store selected by configuration.

    Args:
        config: Optional TodosConfig. If not provided, loads from default location.

    Returns:
        TodoStore instance (not yet connected)

    Raises:
        ValueError: If the backend is unknown or its settings are incomplete
    """
    if config is None:
        from todos.config import load_config
        config = load_config()

    backend = config.store.backend.lower()

    if backend == "sql":
        from todos.db.factory import create_adapter
        from todos.stores.sql import SqlTodoStore

        logger.info("Using raw SQL store")
        return SqlTodoStore(create_adapter(config))

    elif backend == "template":
        from todos.stores.template import TemplateTodoStore

        url = config.database_url
        if not url:
            raise ValueError(
                "PostgreSQL URL not configured. "
                "Set database.postgres.url in config or TODOS_DATABASE_URL env var."
            )

        options = {}
        if url.startswith("postgresql"):
            db = config.database
            options = {
                "pool_size": db.pool_max_size,
                "max_overflow": 0,
                "pool_timeout": db.connect_timeout,
                "pool_recycle": db.idle_timeout,
                "pool_pre_ping": True,
                "connect_args": _asyncpg_connect_args(db),
            }

        logger.info("Using SQLAlchemy template store")
        return TemplateTodoStore(url, **options)

    elif backend == "supabase":
        from todos.stores.supabase import SupabaseTodoStore

        logger.info("Using Supabase store")
        return SupabaseTodoStore(
            config.supabase.url,
            config.supabase.anon_key,
            timeout=config.supabase.timeout,
        )

    raise ValueError(
        f"Unknown store backend: {backend}. "
        "Use 'sql', 'template' or 'supabase'."
    )


def _asyncpg_connect_args(db) -> dict:
    """Per-connection asyncpg settings matching PostgresAdapter's pool."""
    from todos.db.postgres import insecure_ssl_context

    args = {"timeout": db.connect_timeout, "statement_cache_size": 0}
    if db.ssl:
        args["ssl"] = insecure_ssl_context()
    return args


async def init_store(
    config=None,
    migrate: bool | None = None,
    store: TodoStore | None = None,
) -> TodoStore:
    """
    Connect a store and apply migrations if enabled.

    Args:
        config: Optional TodosConfig
        migrate: Override database.auto_migrate
        store: Already-built store to connect; created from config if omitted

    Returns:
        Connected TodoStore instance
    """
    if config is None:
        from todos.config import load_config
        config = load_config()

    if store is None:
        store = create_store(config)
    await store.connect()

    if config.database.auto_migrate if migrate is None else migrate:
        try:
            applied = await store.ensure_schema()
        except Exception:
            await store.close()
            raise
        if applied:
            logger.info(f"Applied migrations: {', '.join(applied)}")

    return store
