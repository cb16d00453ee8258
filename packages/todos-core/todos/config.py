"""
Todos Configuration

Loads settings from ~/.todos/config.yaml with environment variable overrides.
Selects the database (PostgreSQL or SQLite) and which store variant serves requests.
"""

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional
import os
import logging

import yaml
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".todos"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

STORE_BACKENDS = ("sql", "template", "supabase")

_TRUTHY = ("1", "true", "yes", "on")


@dataclass
class DatabaseConfig:
    """Database configuration settings."""

    type: str = "sqlite"  # "sqlite" or "postgres"
    sqlite_path: str = "~/.todos/todos.db"
    postgres_url: Optional[str] = None
    pool_min_size: int = 1
    pool_max_size: int = 20
    connect_timeout: float = 2.0
    idle_timeout: float = 30.0
    ssl: bool = False
    auto_migrate: bool = True


@dataclass
class StoreConfig:
    """Which data-access variant backs the request handlers."""

    backend: str = "sql"  # sql, template, supabase


@dataclass
class SupabaseConfig:
    """Hosted Supabase project settings."""

    url: Optional[str] = None
    anon_key: Optional[str] = None
    anon_key_env: str = "SUPABASE_ANON_KEY"
    timeout: float = 10.0


@dataclass
class ApiConfig:
    """HTTP server settings."""

    prefix: str = "/api"
    host: str = "127.0.0.1"
    port: int = 8000
    expose_error_details: bool = False


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class TodosConfig:
    """
    Complete Todos configuration.

    Loaded from ~/.todos/config.yaml with environment variable overrides.
    """

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    supabase: SupabaseConfig = field(default_factory=SupabaseConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def database_url(self) -> Optional[str]:
        """SQLAlchemy-style URL for the configured database."""
        if self.database.type in ("postgres", "postgresql"):
            url = self.database.postgres_url
            if not url:
                return None
            _, _, rest = url.partition("://")
            return f"postgresql+asyncpg://{rest}" if rest else url
        path = Path(self.database.sqlite_path).expanduser()
        return f"sqlite+aiosqlite:///{path}"

    def to_dict(self) -> dict:
        """Convert to dictionary for display (masks secrets)."""
        result = asdict(self)

        url = result["database"].get("postgres_url")
        if url:
            result["database"]["postgres_url"] = mask_url(url)

        if result["supabase"].get("anon_key"):
            result["supabase"]["anon_key"] = "***"

        return result


def mask_url(url: str) -> str:
    """Hide the password of a database URL; unparseable URLs are hidden entirely."""
    try:
        return make_url(url).render_as_string(hide_password=True)
    except ArgumentError:
        return "***"


def _parse_database_config(data: dict) -> DatabaseConfig:
    """Parse database configuration from YAML data."""
    db_data = data.get("database", {})
    defaults = DatabaseConfig()

    sqlite_config = db_data.get("sqlite", {})
    postgres_config = db_data.get("postgres", {})

    postgres_url = postgres_config.get("url")

    # Check for URL from environment variable reference
    url_env = postgres_config.get("url_env")
    if url_env and not postgres_url:
        postgres_url = os.environ.get(url_env)

    return DatabaseConfig(
        type=db_data.get("type", defaults.type),
        sqlite_path=sqlite_config.get("path", defaults.sqlite_path),
        postgres_url=postgres_url,
        pool_min_size=int(postgres_config.get("pool_min_size", defaults.pool_min_size)),
        pool_max_size=int(postgres_config.get("pool_max_size", defaults.pool_max_size)),
        connect_timeout=float(postgres_config.get("connect_timeout", defaults.connect_timeout)),
        idle_timeout=float(postgres_config.get("idle_timeout", defaults.idle_timeout)),
        ssl=bool(postgres_config.get("ssl", defaults.ssl)),
        auto_migrate=bool(db_data.get("auto_migrate", defaults.auto_migrate)),
    )


def _parse_store_config(data: dict) -> StoreConfig:
    store_data = data.get("store", {})
    return StoreConfig(backend=store_data.get("backend", "sql"))


def _parse_supabase_config(data: dict) -> SupabaseConfig:
    """Parse Supabase configuration from YAML data."""
    supabase_data = data.get("supabase", {})
    key_env = supabase_data.get("anon_key_env", "SUPABASE_ANON_KEY")

    return SupabaseConfig(
        url=supabase_data.get("url"),
        anon_key=supabase_data.get("anon_key") or os.environ.get(key_env),
        anon_key_env=key_env,
        timeout=float(supabase_data.get("timeout", 10.0)),
    )


def _parse_api_config(data: dict) -> ApiConfig:
    api_data = data.get("api", {})
    defaults = ApiConfig()

    return ApiConfig(
        prefix=api_data.get("prefix", defaults.prefix),
        host=api_data.get("host", defaults.host),
        port=int(api_data.get("port", defaults.port)),
        expose_error_details=bool(api_data.get("expose_error_details", False)),
    )


def load_config(config_path: Optional[Path] = None) -> TodosConfig:
    """
    Load configuration from file with environment variable overrides.

    Args:
        config_path: Optional path to config file. Defaults to ~/.todos/config.yaml

    Returns:
        TodosConfig instance
    """
    config_file = config_path or CONFIG_FILE
    config = TodosConfig()

    if config_file.exists():
        try:
            with open(config_file, 'r') as f:
                data = yaml.safe_load(f) or {}

            config.database = _parse_database_config(data)
            config.store = _parse_store_config(data)
            config.supabase = _parse_supabase_config(data)
            config.api = _parse_api_config(data)
            config.logging = LoggingConfig(
                level=data.get("logging", {}).get("level", "INFO")
            )

        except yaml.YAMLError as e:
            logger.warning(f"Could not parse config file at {config_file}: {e}")
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Invalid values in config file {config_file}: {e}")

    # Environment variable overrides
    if os.environ.get("TODOS_DATABASE_URL"):
        config.database.type = "postgres"
        config.database.postgres_url = os.environ["TODOS_DATABASE_URL"]
    elif os.environ.get("POSTGRES_URL"):
        config.database.type = "postgres"
        config.database.postgres_url = os.environ["POSTGRES_URL"]

    if os.environ.get("TODOS_STORE_BACKEND"):
        config.store.backend = os.environ["TODOS_STORE_BACKEND"]

    if os.environ.get("SUPABASE_URL"):
        config.supabase.url = os.environ["SUPABASE_URL"]

    if os.environ.get(config.supabase.anon_key_env):
        config.supabase.anon_key = os.environ[config.supabase.anon_key_env]

    if os.environ.get("TODOS_LOG_LEVEL"):
        config.logging.level = os.environ["TODOS_LOG_LEVEL"]

    if os.environ.get("TODOS_EXPOSE_ERROR_DETAILS"):
        config.api.expose_error_details = (
            os.environ["TODOS_EXPOSE_ERROR_DETAILS"].lower() in _TRUTHY
        )

    return config


# Cached config instance
_config: Optional[TodosConfig] = None


def get_config() -> TodosConfig:
    """Get cached config instance, loading if needed."""
    global _config
    if _config is None:
        _config = load_config()
    return _config
