"""PostgreSQL database connection management."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

import asyncpg

from ..config import Settings, settings as default_settings
from ..utils.exceptions import ConfigurationError, StorageUnavailable

logger = logging.getLogger(__name__)

# Failures that mean the store could not be reached or the connection was lost
STORAGE_ERRORS = (
    OSError,
    asyncio.TimeoutError,
    asyncpg.PostgresConnectionError,
    asyncpg.InterfaceError,
)

# Server errors caused by a configured table or column that does not exist
SCHEMA_ERRORS = (
    asyncpg.UndefinedTableError,
    asyncpg.UndefinedColumnError,
)


class DatabaseManager:
    """Manages PostgreSQL database connections.

    Instances are created and passed explicitly to the shift store; there is
    no process-wide pool.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self.pool: asyncpg.Pool | None = None
        self._initialized = False

    async def initialize(self, database_url: str | None = None):
        """Initialize database connection pool."""
        if self._initialized:
            logger.warning("Database already initialized")
            return

        db_url = database_url or self.settings.database_url
        if not db_url:
            raise ConfigurationError(
                "DATABASE_URL setting is required",
                config_key="database_url",
            )

        try:
            self.pool = await asyncpg.create_pool(
                db_url,
                min_size=self.settings.db_min_pool_size,
                max_size=self.settings.db_max_pool_size,
                command_timeout=self.settings.db_command_timeout,
                server_settings={
                    'application_name': 'nursery-rota'
                }
            )

            # Test connection
            async with self.pool.acquire() as conn:
                await conn.fetchval('SELECT 1')

        except (*STORAGE_ERRORS, asyncpg.PostgresError) as e:
            logger.error(f"Failed to initialize database pool: {e}")
            raise StorageUnavailable(
                f"Failed to initialize database pool: {e}",
                operation="initialize",
            ) from e

        self._initialized = True
        logger.info("PostgreSQL connection pool initialized")

    async def close(self):
        """Close database connection pool."""
        if self.pool:
            await self.pool.close()
            self.pool = None
            self._initialized = False
            logger.info("PostgreSQL connection pool closed")

    @asynccontextmanager
    async def get_connection(self):
        """Get a database connection from the pool."""
        if not self.is_initialized:
            raise StorageUnavailable(
                "Database not initialized. Call initialize() first.",
                operation="acquire",
            )

        async with self.pool.acquire() as connection:
            yield connection

    async def execute_query(self, query: str, *args):
        """Execute a query and return results."""
        async with self.get_connection() as conn:
            return await conn.fetch(query, *args)

    @property
    def is_initialized(self) -> bool:
        """Check if database is initialized."""
        return self._initialized and self.pool is not None

    async def health_check(self) -> bool:
        """Check database health."""
        try:
            async with self.get_connection() as conn:
                result = await conn.fetchval('SELECT 1')
                return result == 1
        except (StorageUnavailable, *STORAGE_ERRORS, asyncpg.PostgresError) as e:
            logger.warning(f"Database health check failed: {e}")
            return False
