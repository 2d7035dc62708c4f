"""Tests for pgquery.services.health."""

import pytest

from pgquery.services.health import check_database


class TestCheckDatabase:
    """Tests for check_database."""

    @pytest.mark.asyncio
    async def test_healthy(self, db, connection):
        """Test SELECT 1 returning 1 is healthy."""
        connection.rows = [{"ok": 1}]
        assert await check_database(db) == {"healthy": True, "error": None}

    @pytest.mark.asyncio
    async def test_execution_failure(self, db, connection, pool):
        """Test a failing query is reported, not raised."""
        connection.error = OSError("server closed the connection unexpectedly")

        result = await check_database(db)

        assert result["healthy"] is False
        assert "server closed" in result["error"]
        assert pool.released == 1

    @pytest.mark.asyncio
    async def test_unexpected_value(self, db, connection):
        """Test an unexpected result is unhealthy."""
        connection.rows = []
        result = await check_database(db)
        assert result["healthy"] is False
        assert "None" in result["error"]
