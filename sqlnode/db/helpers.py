from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Sequence
from typing import Any, TypeVar

T = TypeVar("T")

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_$#]*$")
_MAX_IDENTIFIER_LENGTH = 128


def validate_identifier(name: str, identifier_type: str = "identifier") -> str:
    """
    Validate that an identifier (table/column name) is safe for SQL interpolation.

    Identifiers cannot be bound as parameters, so parameterized statements still
    interpolate table and column names. Each dot-separated part must start with
    a letter or underscore and contain only letters, digits, ``_``, ``$`` and ``#``
    (the Oracle unquoted identifier alphabet).

    Args:
        name: The identifier to validate, optionally schema-qualified
        identifier_type: Description of the identifier (for error messages)

    Returns:
        The validated identifier (unchanged if valid)

    Raises:
        TypeError: If identifier is not a string
        ValueError: If identifier contains unsafe characters or is invalid

    Example:
        >>> validate_identifier("hr.employees", "table")
        'hr.employees'
        >>> validate_identifier("'; DROP TABLE--", "table")
        ValueError: Invalid table "'; DROP TABLE--": ...
    """
    if not isinstance(name, str):
        raise TypeError(f"{identifier_type} must be a string, got {type(name).__name__}")

    if not name:
        raise ValueError(f"{identifier_type} cannot be empty")

    for part in name.split("."):
        if not _IDENTIFIER_RE.match(part):
            raise ValueError(
                f"Invalid {identifier_type} {name!r}: "
                "must start with letter/underscore and contain only alphanumeric characters, '_', '$' or '#'"
            )
        if len(part) > _MAX_IDENTIFIER_LENGTH:
            raise ValueError(
                f"{identifier_type} {name!r} exceeds the {_MAX_IDENTIFIER_LENGTH}-character limit"
            )

    return name


def split_columns(column_string: str) -> list[str]:
    """Split a comma-separated column list, trimming each name and dropping blanks."""
    return [column.strip() for column in column_string.split(",") if column.strip()]


def chunked(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield consecutive slices of at most ``size`` items, preserving order."""
    if size <= 0:
        raise ValueError("chunk size must be > 0")
    for start in range(0, len(items), size):
        yield items[start:start + size]


def count_rows_affected(rows_affected: Any) -> int:
    """
    Normalise a driver's rows-affected report to one integer.

    Accepts an int, None (0), or a sequence of per-statement counts in which
    None entries also count as 0.
    """
    if rows_affected is None:
        return 0
    if isinstance(rows_affected, Iterable) and not isinstance(rows_affected, (str, bytes)):
        return sum(int(count) for count in rows_affected if count is not None)
    return int(rows_affected)
