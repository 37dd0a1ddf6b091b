"""
Shared asyncpg plumbing for the PostgreSQL read adapters.
"""
import asyncio
import logging
from typing import Any, List, Optional

import asyncpg
from asyncpg import Pool, Record

from ..config.constants import SCHEMA_NAME_PATTERN
from ..config.settings import AuthzSettings, get_settings
from ..core.exceptions import ConfigurationError, InvalidSchemaError, StoreUnavailableError

logger = logging.getLogger(__name__)


# Driver, network and timeout failures that mean "the store could not answer"
STORE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)


async def create_pool(settings: Optional[AuthzSettings] = None) -> Pool:
    """Create an asyncpg pool from settings."""
    settings = settings or get_settings()
    if not settings.database_url:
        raise ConfigurationError(
            "AUTHZ_DATABASE_URL is not configured",
            details={"setting": "database_url"},
        )

    dsn = settings.database_url.replace("+asyncpg", "")
    logger.info(f"Creating authorization database pool with size {settings.db_pool_max_size}")

    try:
        pool = await asyncpg.create_pool(
            dsn,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            command_timeout=settings.db_command_timeout,
            server_settings={"application_name": "msp-authz"},
        )
    except STORE_ERRORS as e:
        logger.error(f"Failed to create authorization database pool: {e}")
        raise StoreUnavailableError(f"Failed to create database pool: {e}") from e

    logger.info("Authorization database pool created successfully")
    return pool


class PostgresReader:
    """Base for read-only adapters: schema validation and driver error translation."""

    def __init__(self, pool: Pool, schema: str = "public", timeout: Optional[float] = None):
        self.pool = pool
        self.schema = self._validate_schema_name(schema)
        self.timeout = timeout

    @staticmethod
    def _validate_schema_name(schema_name: str) -> str:
        """Validate schema name to prevent SQL injection."""
        if SCHEMA_NAME_PATTERN.match(schema_name or ""):
            return schema_name
        raise InvalidSchemaError(
            f"Invalid schema name: {schema_name}",
            details={"schema": schema_name},
        )

    def _table(self, name: str) -> str:
        return f"{self.schema}.{name}"

    async def _fetch(self, operation: str, query: str, *args: Any) -> List[Record]:
        try:
            return await self.pool.fetch(query, *args, timeout=self.timeout)
        except STORE_ERRORS as e:
            logger.error(f"Failed to {operation}: {e}")
            raise StoreUnavailableError(
                f"Failed to {operation}: {e}",
                details={"operation": operation},
            ) from e

    async def _fetchrow(self, operation: str, query: str, *args: Any) -> Optional[Record]:
        try:
            return await self.pool.fetchrow(query, *args, timeout=self.timeout)
        except STORE_ERRORS as e:
            logger.error(f"Failed to {operation}: {e}")
            raise StoreUnavailableError(
                f"Failed to {operation}: {e}",
                details={"operation": operation},
            ) from e
