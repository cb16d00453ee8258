"""
Schema migrations.

Versioned .sql files live next to this module, one directory per dialect.
Applied versions are recorded in a `schema_migrations` table.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Set

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

CREATE_MIGRATIONS_TABLE = """
    CREATE TABLE IF NOT EXISTS schema_migrations (
        version TEXT PRIMARY KEY,
        name TEXT NOT NULL
    )
"""


@dataclass
class Migration:
    """One .sql file split into executable statements."""

    version: str
    name: str
    statements: List[str]


def split_statements(sql: str) -> List[str]:
    """Split a migration file on semicolons, dropping comment lines."""
    lines = [line for line in sql.splitlines() if not line.strip().startswith("--")]
    return [s.strip() for s in "\n".join(lines).split(";") if s.strip()]


def load_migrations(dialect: str) -> List[Migration]:
    """Return the migrations for a dialect ("postgres" or "sqlite"), in version order."""
    migrations_dir = MIGRATIONS_DIR / dialect
    if not migrations_dir.is_dir():
        raise ValueError(f"No migrations for dialect: {dialect}")

    return [
        Migration(
            version=sql_file.name.split("_")[0],
            name=sql_file.name,
            statements=split_statements(sql_file.read_text()),
        )
        for sql_file in sorted(migrations_dir.glob("*.sql"))
    ]


def pending_migrations(dialect: str, applied: Set[str]) -> List[Migration]:
    return [m for m in load_migrations(dialect) if m.version not in applied]


async def run_migrations(adapter) -> List[str]:
    """
    Run pending database migrations through a DatabaseAdapter.

    Returns:
        Names of the migration files applied
    """
    await adapter.execute(CREATE_MIGRATIONS_TABLE)
    rows = await adapter.fetch("SELECT version FROM schema_migrations")
    applied_versions = {row["version"] for row in rows}

    applied = []
    for migration in pending_migrations(adapter.dialect, applied_versions):
        logger.info(f"Running migration: {migration.name}")
        for statement in migration.statements:
            try:
                await adapter.execute(statement)
            except Exception as e:
                logger.error(f"Migration error in {migration.name}: {e}")
                raise
        await adapter.execute(
            "INSERT INTO schema_migrations (version, name) VALUES ($1, $2)",
            migration.version, migration.name,
        )
        applied.append(migration.name)

    return applied
