"""Exceptions raised by query rewriting and execution."""

from typing import Any, Iterable, Optional


class PgQueryError(Exception):
    """Base class for all pgquery errors."""


class MissingParameterError(PgQueryError, KeyError):
    """A named placeholder has no matching key in the supplied mapping."""

    def __init__(self, placeholder: str, available: Iterable[str]):
        self.placeholder = placeholder
        self.available = list(available)
        super().__init__(
            f"No {placeholder} in params (keys: {', '.join(self.available)})"
        )

    def __str__(self):
        # KeyError would repr() the message
        return self.args[0]


class MultipleFieldsError(PgQueryError):
    """get_one_field matched more than one row."""

    def __init__(self, row_count: int):
        self.row_count = row_count
        super().__init__(f"More than one row returned ({row_count}), expected at most one")


class ExecutionError(PgQueryError):
    """
    Statement execution failed.

    Carries the final SQL, the bound parameters and the server session id
    so the failure can be matched against server-side logs. The driver
    exception is available as ``cause`` and as ``__cause__``.
    """

    def __init__(
        self,
        sql: str,
        params: Optional[Any],
        session_id: Optional[int],
        cause: BaseException,
    ):
        self.sql = sql
        self.params = params
        self.session_id = session_id
        self.cause = cause
        super().__init__(
            f"Query failed on session {session_id}: {type(cause).__name__}: {cause}"
        )


class ReleaseError(PgQueryError):
    """Returning a leased connection to the pool failed."""

    def __init__(self, session_id: Optional[int], cause: BaseException):
        self.session_id = session_id
        self.cause = cause
        super().__init__(f"Failed to release connection {session_id}: {cause}")


class ConfigError(PgQueryError, ValueError):
    """Invalid database configuration."""
