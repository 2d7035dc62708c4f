"""Tests for the asyncpg pool and connection adapters."""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock

from pgquery.sql import AsyncpgConnection, AsyncpgPool


def _raw_connection(records=None, pid=321):
    raw = MagicMock()
    raw.get_server_pid.return_value = pid
    raw.fetch = AsyncMock(return_value=records or [])
    return raw


class TestAsyncpgConnection:
    """Tests for AsyncpgConnection."""

    def test_session_id_is_server_pid(self):
        """Test session id comes from the backend pid."""
        assert AsyncpgConnection(_raw_connection(pid=99)).session_id == 99

    @pytest.mark.asyncio
    async def test_execute_spreads_params_and_returns_dicts(self):
        """Test positional values are passed as fetch args and rows become dicts."""
        raw = _raw_connection(records=[{"b": 2, "a": 1}])
        connection = AsyncpgConnection(raw)

        rows = await connection.execute("SELECT $1, $2", ["x", "y"])

        raw.fetch.assert_awaited_once_with("SELECT $1, $2", "x", "y")
        assert rows == [{"b": 2, "a": 1}]
        assert list(rows[0]) == ["b", "a"]


class TestAsyncpgPool:
    """Tests for AsyncpgPool."""

    @pytest.mark.asyncio
    async def test_acquire_wraps_connection(self):
        """Test acquire returns an adapter around the pool's connection."""
        raw = _raw_connection()
        pool = MagicMock()
        pool.acquire = AsyncMock(return_value=raw)

        connection = await AsyncpgPool(pool).acquire()

        assert isinstance(connection, AsyncpgConnection)
        assert connection.raw is raw

    @pytest.mark.asyncio
    async def test_release_returns_raw_connection(self):
        """Test release hands the raw connection back."""
        raw = _raw_connection()
        pool = MagicMock()
        pool.release = AsyncMock()

        await AsyncpgPool(pool).release(AsyncpgConnection(raw))

        pool.release.assert_awaited_once_with(raw)
        raw.terminate.assert_not_called()

    @pytest.mark.asyncio
    async def test_failed_release_terminates(self):
        """Test a connection that cannot be released is terminated, and the error raised."""
        raw = _raw_connection()
        pool = MagicMock()
        pool.release = AsyncMock(side_effect=RuntimeError("release failed"))

        with pytest.raises(RuntimeError, match="release failed"):
            await AsyncpgPool(pool).release(AsyncpgConnection(raw))

        raw.terminate.assert_called_once()

    @pytest.mark.asyncio
    async def test_close(self):
        """Test close closes the asyncpg pool."""
        pool = MagicMock()
        pool.close = AsyncMock()

        await AsyncpgPool(pool).close()

        pool.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_cancelled_release_terminates(self):
        """Test a release interrupted by cancellation still terminates the connection."""
        raw = _raw_connection()
        pool = MagicMock()
        pool.release = AsyncMock(side_effect=asyncio.CancelledError())

        with pytest.raises(asyncio.CancelledError):
            await AsyncpgPool(pool).release(AsyncpgConnection(raw))

        raw.terminate.assert_called_once()
