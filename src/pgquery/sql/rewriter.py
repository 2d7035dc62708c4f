"""
Named parameter rewriting.

Converts SQL written with named placeholders into the positional form
PostgreSQL expects:

    :name   -> $1, $2, ... (value is bound)
    :!name  -> "value"     (identifier substituted inline, for schema/table/column names)
    ::type  -> untouched   (type cast)
"""
import string
from typing import Any, List, Mapping, Tuple

from .errors import MissingParameterError


NAME_CHARS = frozenset(string.ascii_letters + string.digits + "_")


def quote_identifier(value: Any) -> str:
    """Quote a value as a SQL identifier, doubling embedded double quotes."""
    return '"' + str(value).replace('"', '""') + '"'


def rewrite(sql: str, params: Mapping[str, Any]) -> Tuple[str, List[Any]]:
    """
    Rewrite named placeholders in ``sql`` to positional markers.

    Single left-to-right scan. Each value placeholder occurrence takes a
    new positional slot, so a name used twice is bound twice.

    Args:
        sql: Query text with ``:name`` / ``:!name`` placeholders
        params: Placeholder name -> value

    Returns:
        Tuple of (rewritten sql, bound values in marker order)

    Raises:
        MissingParameterError: If a placeholder has no key in params
    """
    parts: List[str] = []
    values: List[Any] = []
    copied_to = 0
    i = 0
    length = len(sql)

    while i < length:
        # Outside a placeholder: look for a colon that does not follow another colon
        if sql[i] != ":" or (i > 0 and sql[i - 1] == ":"):
            i += 1
            continue

        # Reading a name
        start = i + 1
        is_identifier = start < length and sql[start] == "!"
        name_start = start + 1 if is_identifier else start
        end = name_start
        while end < length and sql[end] in NAME_CHARS:
            end += 1

        if end == name_start:
            # Bare colon (or ":!") with no name, leave as text
            i += 1
            continue

        name = sql[name_start:end]
        if name not in params:
            raise MissingParameterError(sql[start:end], params.keys())

        parts.append(sql[copied_to:i])
        if is_identifier:
            parts.append(quote_identifier(params[name]))
        else:
            values.append(params[name])
            parts.append(f"${len(values)}")

        copied_to = i = end

    parts.append(sql[copied_to:])
    return "".join(parts), values
