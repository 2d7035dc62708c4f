"""SQL query executor - named parameters, connection selection and diagnostics."""

import asyncio
from typing import Any, List, Mapping, Optional, Tuple, Union

from .errors import ExecutionError, MultipleFieldsError, ReleaseError
from .logger import QueryLogger, resolve_logger
from .models import Named, Params, Positional, QueryOptions, Row
from .pool import Connection
from .rewriter import rewrite


def prepare(sql: str, params: Params) -> Tuple[str, List[Any]]:
    """Resolve a parameter bag to final SQL and positional values."""
    if params is None:
        return sql, []
    if isinstance(params, Named):
        return rewrite(sql, params.values)
    if isinstance(params, Positional):
        return sql, params.as_list()
    raise TypeError(
        f"params must be Positional, Named or None, not {type(params).__name__}"
    )


def format_params(values: List[Any]) -> str:
    """Human-readable rendering of bound values for log records."""
    return repr(values)


class QueryExecutor:
    """
    Runs single statements for a database, schema or table.

    Uses the connection bound to the current context when there is one
    (it is never released here), otherwise leases a connection from the
    pool for the duration of the call and always gives it back.

    Subclasses set ``db`` (the owner of ``pool``, ``bound_connection``,
    ``logger`` and ``default_logger``) and optionally ``owner_schema``.
    """

    def __init__(self, db=None, owner_schema=None, logger: Optional[QueryLogger] = None):
        self.db = db
        self.owner_schema = owner_schema
        self.logger = logger

    def set_logger(self, logger: Optional[QueryLogger]):
        self.logger = logger

    def get_logger(
        self, use_console_as_default: bool, call_logger: Optional[QueryLogger] = None
    ) -> QueryLogger:
        """Resolve call -> executor -> schema -> database -> default/console."""
        candidates = [
            call_logger,
            self.logger,
            self.owner_schema.logger if self.owner_schema is not None else None,
            self.db.logger,
        ]
        return resolve_logger(candidates, self.db.default_logger, use_console_as_default)

    async def run(self, sql: str) -> List[Row]:
        """Execute SQL without parameters."""
        return await self.query(sql)

    async def query(
        self,
        sql: str,
        params: Params = None,
        *,
        logger: Optional[QueryLogger] = None,
    ) -> List[Row]:
        """
        Execute one statement and return its rows.

        Params can be
        1) Positional([...]): sql uses $1 $2 placeholders
        2) Named({...}): sql uses
           :example  -> bound value, rewritten to $1 $2 ...
           :!example -> DDL name (schema, table, column), quoted inline

        e.g. query('select * from a.b where id=$1', Positional(['the_stage_is_set']))
        e.g. query('select * from :!schema.:!table where id=:id',
                   Named({'schema': 'a', 'table': 'b', 'id': 'the_stage_is_set'}))

        Raises:
            MissingParameterError: Named placeholder without a value (before any I/O)
            ExecutionError: Acquiring or executing failed
        """
        sql, values = prepare(sql, params)

        connection: Optional[Connection] = self.db.bound_connection
        leased = connection is None
        try:
            if leased:
                connection = await self.db.pool.acquire()
            self.get_logger(False, logger).log(sql, format_params(values), connection.session_id)
            return await connection.execute(sql, values)
        except asyncio.CancelledError:
            self.get_logger(True, logger).error(
                sql, format_params(values), _session_id(connection), "cancelled"
            )
            raise
        except Exception as e:
            session_id = _session_id(connection)
            self.get_logger(True, logger).error(sql, format_params(values), session_id)
            raise ExecutionError(sql, values, session_id, e) from e
        finally:
            if leased and connection is not None:
                await self._release(connection, logger)

    async def _release(self, connection: Connection, call_logger: Optional[QueryLogger]):
        """Return a leased connection. Failures are logged; only cancellation is re-raised."""
        try:
            await self.db.pool.release(connection)
        except asyncio.CancelledError as e:
            error = ReleaseError(_session_id(connection), e)
            self.get_logger(True, call_logger).error('connection error', 'cancelled', str(error))
            raise
        except Exception as e:
            error = ReleaseError(_session_id(connection), e)
            self.get_logger(True, call_logger).error('connection error', str(error))

    async def get_one_field(
        self,
        sql: str,
        params: Params = None,
        *,
        logger: Optional[QueryLogger] = None,
    ) -> Any:
        """Return the first field of the only row, or None when there are no rows."""
        rows = await self.query(sql, params, logger=logger)
        if len(rows) > 1:
            raise MultipleFieldsError(len(rows))
        if not rows:
            return None
        return next(iter(rows[0].values()), None)

    async def get_one_column(
        self,
        sql: str,
        params: Params = None,
        *,
        logger: Optional[QueryLogger] = None,
    ) -> List[Any]:
        """Return the first column of every row, in row order."""
        rows = await self.query(sql, params, logger=logger)
        if not rows:
            return []
        field_name = next(iter(rows[0]), None)
        return [row.get(field_name) for row in rows]

    @staticmethod
    def build_options_clause(options: Union[QueryOptions, Mapping[str, Any], None]) -> str:
        """
        Build the trailing GROUP BY / ORDER BY / LIMIT fragment.

        Each fragment ends with a space; the result is empty when no option is set.
        """
        if options is None:
            return ''
        if not isinstance(options, QueryOptions):
            options = QueryOptions.model_validate(options)

        extra = ''
        if options.group_by:
            extra += 'GROUP BY ' + options.group_by + ' '
        if options.order_by:
            extra += 'ORDER BY ' + options.order_by + ' '
        if options.limit:
            extra += 'LIMIT %d ' % options.limit
        return extra


def _session_id(connection: Optional[Connection]) -> Optional[int]:
    return connection.session_id if connection is not None else None
