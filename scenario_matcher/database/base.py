"""
Repository base class.

Repositories own one table and read through the shared pool. Errors raised
by the pool keep their type; anything else is reported as DatabaseQueryError.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from .connection import db_pool
from ..config.exceptions import DatabaseError, DatabaseQueryError
from ..config.logging import get_logger

logger = get_logger(__name__)


class BaseRepository(ABC):
    """Single-table read repository."""

    @property
    @abstractmethod
    def table_name(self) -> str:
        pass

    async def _fetch_column(self, column: str, key_column: str, key: Any) -> Optional[Any]:
        """
        Read one column of the row whose key_column equals key.

        Returns:
            The value, or None when no row matches

        Raises:
            DatabaseError: If the lookup fails
        """
        query = f"SELECT {column} FROM {self.table_name} WHERE {key_column} = $1"
        try:
            return await db_pool.fetchval(query, key)
        except DatabaseError:
            raise
        except Exception as e:
            logger.error("Repository lookup failed", table=self.table_name, key=key, error=str(e), exc_info=True)
            raise DatabaseQueryError(f"Lookup in {self.table_name} failed: {e}") from e
