"""
Database and schema handles.

A Database owns the connection pool, the database-level logger and the
connection bound to the current context. Schemas share all of that and add
a schema-level logger plus table helpers.
"""
import contextvars
import logging
from contextlib import contextmanager
from typing import Any, List, Mapping, Optional, Union

from pgquery.config import DatabaseConfig
from pgquery.sql.executor import QueryExecutor
from pgquery.sql.logger import NullLogger, QueryLogger
from pgquery.sql.models import Positional, QueryOptions, Row
from pgquery.sql.pool import AsyncpgPool, Connection, ConnectionPool
from pgquery.sql.rewriter import quote_identifier, rewrite


logger = logging.getLogger(__name__)


class Database(QueryExecutor):
    """Query executor for a whole database."""

    def __init__(
        self,
        pool: ConnectionPool,
        logger: Optional[QueryLogger] = None,
        default_logger: Optional[QueryLogger] = None,
    ):
        super().__init__(db=self, logger=logger)
        self.pool = pool
        self.default_logger = default_logger or NullLogger()
        self.schemas: dict = {}
        self._bound: contextvars.ContextVar = contextvars.ContextVar(
            f"pgquery_bound_connection_{id(self)}", default=None
        )

    @classmethod
    async def connect(
        cls,
        config: DatabaseConfig,
        query_logger: Optional[QueryLogger] = None,
    ) -> "Database":
        """Open a pool from configuration."""
        pool = await AsyncpgPool.create(
            config.database_url,
            min_size=config.pool_min_size,
            max_size=config.pool_max_size,
            command_timeout=config.command_timeout,
        )
        logger.info(
            f"Connected pool (min={config.pool_min_size}, max={config.pool_max_size})"
        )
        return cls(pool, logger=query_logger)

    async def close(self):
        """Close the pool, if it supports closing."""
        close = getattr(self.pool, "close", None)
        if close is not None:
            await close()
            logger.info("Database pool closed")

    @property
    def bound_connection(self) -> Optional[Connection]:
        """Connection bound to the current context, or None."""
        return self._bound.get()

    @contextmanager
    def bind(self, connection: Connection):
        """
        Use ``connection`` for every query run in this context.

        The connection is not released on exit and no transaction is started;
        the caller owns both. The previous binding is restored on exit.
        """
        token = self._bound.set(connection)
        try:
            yield connection
        finally:
            self._bound.reset(token)

    def schema(self, name: str, logger: Optional[QueryLogger] = None) -> "Schema":
        """Get (or create) the handle for schema ``name``."""
        if name not in self.schemas:
            self.schemas[name] = Schema(self, name, logger=logger)
        elif logger is not None:
            self.schemas[name].set_logger(logger)
        return self.schemas[name]


class Schema(QueryExecutor):
    """Query executor scoped to one schema."""

    def __init__(self, db: Database, name: str, logger: Optional[QueryLogger] = None):
        super().__init__(db=db, logger=logger)
        self.owner_schema = self
        self.name = name

    def qualified_name(self, table: str) -> str:
        return f"{quote_identifier(self.name)}.{quote_identifier(table)}"

    async def find(
        self,
        table: str,
        conditions: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None,
        options: Union[QueryOptions, Mapping[str, Any], None] = None,
    ) -> List[Row]:
        """
        Select rows from ``table``.

        ``conditions`` is a WHERE body using named placeholders bound from
        ``params``. ``options`` adds GROUP BY / ORDER BY / LIMIT, chooses the
        selected fields and may carry a call-level logger.
        """
        if options is not None and not isinstance(options, QueryOptions):
            options = QueryOptions.model_validate(options)

        if options is not None and options.fields:
            field_list = ", ".join(quote_identifier(f) for f in options.fields)
        else:
            field_list = "*"

        sql = f"SELECT {field_list} FROM {self.qualified_name(table)}"
        values: list = []
        if conditions:
            # Only the WHERE body carries placeholders
            where, values = rewrite(conditions, params or {})
            sql += f" WHERE {where}"
        sql += " " + self.build_options_clause(options)

        return await self.query(
            sql.rstrip(),
            Positional(values),
            logger=options.logger if options is not None else None,
        )

    def __repr__(self):
        return f"Schema(name='{self.name}')"
