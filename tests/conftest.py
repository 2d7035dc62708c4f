"""Shared fakes and fixtures: in-memory pool, connection and logger."""

import pytest

from pgquery.database import Database


class FakeConnection:
    """Connection that records statements and returns canned rows."""

    def __init__(self, session_id=4242, rows=None, error=None, echo=False):
        self.session_id = session_id
        self.rows = rows if rows is not None else []
        self.error = error
        self.echo = echo
        self.calls = []
        self.on_execute = None

    async def execute(self, sql, params):
        self.calls.append((sql, list(params)))
        if self.on_execute is not None:
            self.on_execute(sql, params)
        if self.error is not None:
            raise self.error
        if self.echo:
            return [{f"${i}": value for i, value in enumerate(params, start=1)}]
        return self.rows


class FakePool:
    """Pool that hands out one connection and counts acquire/release calls."""

    def __init__(self, connection=None, acquire_error=None, release_error=None):
        self.connection = connection or FakeConnection()
        self.acquire_error = acquire_error
        self.release_error = release_error
        self.acquired = 0
        self.released = 0
        self.closed = False

    async def acquire(self):
        self.acquired += 1
        if self.acquire_error is not None:
            raise self.acquire_error
        return self.connection

    async def release(self, connection):
        assert connection is self.connection
        self.released += 1
        if self.release_error is not None:
            raise self.release_error

    async def close(self):
        self.closed = True


class RecordingLogger:
    """QueryLogger that keeps every record."""

    def __init__(self, name="recorder"):
        self.name = name
        self.records = []

    def log(self, *args):
        self.records.append(("log", args))

    def error(self, *args):
        self.records.append(("error", args))

    def levels(self):
        return [level for level, _ in self.records]


@pytest.fixture
def connection():
    return FakeConnection()


@pytest.fixture
def pool(connection):
    return FakePool(connection)


@pytest.fixture
def recorder():
    return RecordingLogger()


@pytest.fixture
def db(pool, recorder):
    return Database(pool, logger=recorder)
