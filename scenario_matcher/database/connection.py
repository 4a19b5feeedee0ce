"""
asyncpg connection pool for the postgres weight store.

The pool is opened in the application lifespan when WEIGHT_STORE_BACKEND is
'postgres' and closed on shutdown. Lookups are single-value reads, so the
pool stays small and each statement is bounded by the weight lookup timeout.
"""

import asyncio
from typing import Any, Optional

import asyncpg

from ..config.exceptions import DatabaseConnectionError
from ..config.logging import get_logger
from ..config.settings import Settings, settings as default_settings

logger = get_logger(__name__)


class DatabaseConnectionPool:
    """Lazily created, shared asyncpg pool."""

    def __init__(self, config: Optional[Settings] = None):
        self._config = config or default_settings
        self._pool: Optional[asyncpg.Pool] = None
        self._lock = asyncio.Lock()

    async def create_pool(self, min_size: int = 1, max_size: int = 5) -> asyncpg.Pool:
        """
        Open the pool if it is not open yet.

        Raises:
            DatabaseConnectionError: If the database cannot be reached
        """
        async with self._lock:
            if self._pool is not None:
                return self._pool

            config = self._config
            logger.info(
                "Opening weight database pool",
                host=config.postgres_host,
                port=config.postgres_port,
                database=config.postgres_db,
                max_size=max_size,
            )
            try:
                self._pool = await asyncpg.create_pool(
                    dsn=config.database_url,
                    min_size=min_size,
                    max_size=max_size,
                    command_timeout=config.weight_store_timeout_seconds,
                )
            except (OSError, asyncpg.PostgresError) as e:
                logger.error("Weight database unreachable", error=str(e), error_type=type(e).__name__)
                raise DatabaseConnectionError(f"Failed to open weight database pool: {e}") from e
            return self._pool

    async def close_pool(self) -> None:
        async with self._lock:
            if self._pool is None:
                return
            await self._pool.close()
            self._pool = None
            logger.info("Weight database pool closed")

    async def fetchval(self, query: str, *args) -> Optional[Any]:
        """
        Run a query and return the first column of the first row.

        Raises:
            DatabaseConnectionError: If the pool cannot be opened or the query fails
        """
        pool = self._pool or await self.create_pool()
        try:
            return await pool.fetchval(query, *args)
        except (OSError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            logger.error("Weight database query failed", query=query, error=str(e))
            raise DatabaseConnectionError(f"Weight database query failed: {e}") from e

    @property
    def is_connected(self) -> bool:
        return self._pool is not None and not self._pool.is_closing()


# Shared pool used by repositories and the health check
db_pool = DatabaseConnectionPool()
