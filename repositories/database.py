# ============================================================================
# DATABASE CONNECTION POOL
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Core - Async PostgreSQL connection management
# PURPOSE: Connection pool sized to the introspection concurrency limit
# CREATED: 17 OCT 2026
# ============================================================================
"""
Database Connection Pool

Manages async PostgreSQL connections using psycopg3 and psycopg_pool.
One pool is opened per CLI command and closed when the command ends.
Each concurrent introspection task borrows its own connection, so the
pool's max_size matches the batch size.

Usage:
    from repositories.database import DatabasePool

    async with DatabasePool(conninfo, max_size=20) as pool:
        async with pool.connection() as conn:
            await conn.execute("SELECT 1")
"""

from typing import Optional

from psycopg import AsyncConnection
from psycopg_pool import AsyncConnectionPool

from core.config.defaults import IntrospectionDefaults
from core.logging import ComponentType, get_logger
from infrastructure.postgresql import mask_connection_string

logger = get_logger(__name__, ComponentType.REPOSITORY)


def _make_configure(statement_timeout_ms: int):
    """Per-connection setup run by the pool."""

    async def configure(conn: AsyncConnection) -> None:
        await conn.execute(f"SET statement_timeout = {int(statement_timeout_ms)}")

    return configure


async def open_pool(
    connection_string: str,
    max_size: int = 20,
    min_size: int = 1,
    statement_timeout_ms: int = IntrospectionDefaults.statement_timeout_ms,
) -> AsyncConnectionPool:
    """
    Create and open a connection pool.

    Args:
        connection_string: Prepared, probed connection string
        max_size: Maximum connections allowed
        min_size: Minimum connections to maintain
        statement_timeout_ms: Per-statement timeout applied to each connection

    Returns:
        Opened AsyncConnectionPool; the caller closes it
    """
    logger.info(f"Opening connection pool: {mask_connection_string(connection_string)}")

    pool = AsyncConnectionPool(
        conninfo=connection_string,
        min_size=min(min_size, max_size),
        max_size=max_size,
        kwargs={"autocommit": True},
        configure=_make_configure(statement_timeout_ms),
        open=False,  # We'll open it explicitly
    )

    await pool.open()
    logger.info(f"Connection pool opened (min={min(min_size, max_size)}, max={max_size})")

    return pool


class DatabasePool:
    """
    Context manager for pool lifecycle.

    Each instance owns its own pool, closed on exit.

    Usage:
        async with DatabasePool(conninfo) as pool:
            async with pool.connection() as conn:
                ...
    """

    def __init__(
        self,
        connection_string: str,
        max_size: int = 20,
        min_size: int = 1,
        statement_timeout_ms: int = IntrospectionDefaults.statement_timeout_ms,
    ):
        self.connection_string = connection_string
        self.max_size = max_size
        self.min_size = min_size
        self.statement_timeout_ms = statement_timeout_ms
        self.pool: Optional[AsyncConnectionPool] = None

    async def __aenter__(self) -> AsyncConnectionPool:
        self.pool = await open_pool(
            connection_string=self.connection_string,
            max_size=self.max_size,
            min_size=self.min_size,
            statement_timeout_ms=self.statement_timeout_ms,
        )
        return self.pool

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.pool is not None:
            await self.pool.close()
            self.pool = None
            logger.info("Connection pool closed")


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "open_pool",
    "DatabasePool",
]
