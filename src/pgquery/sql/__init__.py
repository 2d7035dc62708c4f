"""SQL execution with named parameters over a pooled or bound connection."""
from .errors import (
    PgQueryError,
    MissingParameterError,
    MultipleFieldsError,
    ExecutionError,
    ReleaseError,
    ConfigError,
)
from .models import Positional, Named, Params, QueryOptions, Row
from .rewriter import rewrite, quote_identifier
from .logger import QueryLogger, StdLogger, NullLogger, console_logger, resolve_logger
from .pool import Connection, ConnectionPool, AsyncpgConnection, AsyncpgPool
from .executor import QueryExecutor

__all__ = [
    "PgQueryError",
    "MissingParameterError",
    "MultipleFieldsError",
    "ExecutionError",
    "ReleaseError",
    "ConfigError",
    "Positional",
    "Named",
    "Params",
    "QueryOptions",
    "Row",
    "rewrite",
    "quote_identifier",
    "QueryLogger",
    "StdLogger",
    "NullLogger",
    "console_logger",
    "resolve_logger",
    "Connection",
    "ConnectionPool",
    "AsyncpgConnection",
    "AsyncpgPool",
    "QueryExecutor",
]
