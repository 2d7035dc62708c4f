"""
Query logger providers.

Query diagnostics are written to a small logger interface (``log`` and
``error``) so callers can plug in their own sink per call, per schema or
per database. The stdlib ``logging`` module backs the default adapters.
"""
import logging
from typing import Iterable, Optional, Protocol, runtime_checkable


@runtime_checkable
class QueryLogger(Protocol):
    """Anything with log(*args) and error(*args)."""

    def log(self, *args) -> None: ...

    def error(self, *args) -> None: ...


class StdLogger:
    """QueryLogger backed by a stdlib logger (log -> INFO, error -> ERROR)."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def log(self, *args) -> None:
        self.logger.info(" ".join(str(a) for a in args))

    def error(self, *args) -> None:
        self.logger.error(" ".join(str(a) for a in args))

    def __repr__(self):
        return f"StdLogger(name='{self.logger.name}')"


class NullLogger:
    """Discards everything."""

    def log(self, *args) -> None:
        pass

    def error(self, *args) -> None:
        pass


def console_logger() -> StdLogger:
    """Process-wide fallback logger. Output is configured by the application (setup_logging)."""
    return StdLogger(logging.getLogger("pgquery"))


def resolve_logger(
    candidates: Iterable[Optional[QueryLogger]],
    default: Optional[QueryLogger],
    use_console_as_default: bool,
) -> QueryLogger:
    """
    Return the first configured logger in ``candidates``.

    Candidates are checked in the order given (call, executor, schema,
    database). When none is set, fall back to the console logger if
    ``use_console_as_default`` is True, otherwise to ``default``.
    """
    for candidate in candidates:
        if candidate is not None:
            return candidate
    if use_console_as_default or default is None:
        return console_logger()
    return default
