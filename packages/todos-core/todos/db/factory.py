"""
Database adapter factory.

Creates the appropriate adapter based on configuration. The caller owns the
returned adapter: connect it once at process start and close it on shutdown.
"""

import logging

from todos.db.interface import DatabaseAdapter

logger = logging.getLogger(__name__)


def create_adapter(config=None) -> DatabaseAdapter:
    """
    Create the database adapter based on configuration.

    Args:
        config: Optional TodosConfig. If not provided, loads from default location.

    Returns:
        DatabaseAdapter instance (PostgresAdapter or SQLiteAdapter)

    Raises:
        ValueError: If database configuration is invalid
    """
    if config is None:
        from todos.config import load_config
        config = load_config()

    db = config.database
    db_type = db.type.lower()

    if db_type == "postgres" or db_type == "postgresql":
        from todos.db.postgres import PostgresAdapter

        if not db.postgres_url:
            raise ValueError(
                "PostgreSQL URL not configured. "
                "Set database.postgres.url in config or TODOS_DATABASE_URL env var."
            )

        logger.info("Using PostgreSQL adapter")
        return PostgresAdapter(
            db.postgres_url,
            min_size=db.pool_min_size,
            max_size=db.pool_max_size,
            timeout=db.connect_timeout,
            idle_timeout=db.idle_timeout,
            use_ssl=db.ssl,
        )

    elif db_type == "sqlite":
        from todos.db.sqlite import SQLiteAdapter

        logger.info(f"Using SQLite adapter: {db.sqlite_path}")
        return SQLiteAdapter(db.sqlite_path)

    raise ValueError(
        f"Unknown database type: {db_type}. "
        "Use 'postgres' or 'sqlite'."
    )
