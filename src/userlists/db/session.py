"""Database handle management.

Provides the process-wide persistence backend chosen from Settings.
Handles are cached by backend and location so repeated calls reuse the
same engine (and, for the embedded backend, the same in-memory copy).
"""

from __future__ import annotations

import logging
import threading

from userlists.config import ConfigError, Settings, load_settings
from userlists.db.backends import Database, EmbeddedDatabase, RemoteDatabase

logger = logging.getLogger(__name__)

# Module-level handle cache, keyed by backend and location
_database_cache: dict[str, Database] = {}

# Guards cache misses so concurrent first requests share one handle
_cache_lock = threading.Lock()


def _cache_key(settings: Settings) -> str:
    if settings.resolved_backend == "remote":
        return f"remote:{settings.database_url}"
    return f"embedded:{settings.db_path.resolve()}"


def open_database(settings: Settings) -> Database:
    """Open a new backend for the given settings (uncached).

    Args:
        settings: Resolved configuration.

    Returns:
        RemoteDatabase or EmbeddedDatabase.

    Raises:
        ConfigError: If the remote backend is requested without a URL.
    """
    if settings.resolved_backend == "remote":
        if not settings.database_url:
            raise ConfigError("Remote backend selected without a database URL")
        return RemoteDatabase(settings.database_url)
    return EmbeddedDatabase(settings.db_path)


def get_database(settings: Settings | None = None) -> Database:
    """Get the cached database handle, creating and initializing it once.

    Args:
        settings: Configuration. Defaults to the current environment.

    Returns:
        Database handle with the schema in place.
    """
    if settings is None:
        settings = load_settings()

    key = _cache_key(settings)
    if key in _database_cache:
        return _database_cache[key]

    with _cache_lock:
        # Another thread may have opened it while we waited
        if key in _database_cache:
            return _database_cache[key]

        database = open_database(settings)
        database.init_schema()
        _database_cache[key] = database
        logger.info(f"Opened {database.name} database handle")
        return database


def close_all() -> None:
    """Dispose every cached handle. Used on application shutdown."""
    with _cache_lock:
        while _database_cache:
            _, database = _database_cache.popitem()
            database.close()
    logger.debug("Closed cached database handles")
