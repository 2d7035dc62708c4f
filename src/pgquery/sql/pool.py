"""
Connection and pool providers.

The executor only needs acquire/release from a pool and session_id/execute
from a connection. AsyncpgPool and AsyncpgConnection adapt asyncpg to that
interface; tests use in-memory fakes.
"""
import logging
from typing import Any, List, Optional, Protocol, Sequence

import asyncpg

from .models import Row


logger = logging.getLogger(__name__)


class Connection(Protocol):
    """A single database session."""

    @property
    def session_id(self) -> Optional[int]: ...

    async def execute(self, sql: str, params: Sequence[Any]) -> List[Row]: ...


class ConnectionPool(Protocol):
    """Source of leased connections."""

    async def acquire(self) -> Connection: ...

    async def release(self, connection: Connection) -> None: ...


class AsyncpgConnection:
    """Connection backed by an asyncpg connection."""

    def __init__(self, raw: asyncpg.Connection):
        self.raw = raw

    @property
    def session_id(self) -> Optional[int]:
        """Server backend process id (matches pg_stat_activity.pid)."""
        return self.raw.get_server_pid()

    async def execute(self, sql: str, params: Sequence[Any]) -> List[Row]:
        records = await self.raw.fetch(sql, *params)
        return [dict(record) for record in records]

    def terminate(self) -> None:
        self.raw.terminate()


class AsyncpgPool:
    """ConnectionPool backed by an asyncpg pool."""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    @classmethod
    async def create(
        cls,
        dsn: str,
        min_size: int = 1,
        max_size: int = 10,
        command_timeout: Optional[float] = None,
    ) -> "AsyncpgPool":
        """Open an asyncpg pool."""
        logger.debug(f"Creating connection pool (min={min_size}, max={max_size})")
        pool = await asyncpg.create_pool(
            dsn,
            min_size=min_size,
            max_size=max_size,
            command_timeout=command_timeout,
        )
        return cls(pool)

    async def acquire(self) -> AsyncpgConnection:
        raw = await self.pool.acquire()
        return AsyncpgConnection(raw)

    async def release(self, connection: AsyncpgConnection) -> None:
        try:
            await self.pool.release(connection.raw)
        except BaseException:
            # Do not hand a broken or half-released session back to the pool
            connection.terminate()
            raise

    async def close(self) -> None:
        await self.pool.close()
        logger.debug("Connection pool closed")
