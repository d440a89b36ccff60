from __future__ import annotations

from enum import Enum
from typing import Any


class StatementClass(str, Enum):
    READ = "read"
    CREATE_TABLE = "create_table"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    UNKNOWN = "unknown"


# Checked in order; first match wins.
_PREFIXES: tuple[tuple[str, StatementClass], ...] = (
    ("select", StatementClass.READ),
    ("create table", StatementClass.CREATE_TABLE),
    ("insert into", StatementClass.INSERT),
    ("update", StatementClass.UPDATE),
    ("delete from", StatementClass.DELETE),
)


def normalize_statement(text: str) -> str:
    """Strip surrounding whitespace and case-fold a statement."""
    return text.strip().lower()


def classify(text: Any) -> StatementClass:
    """
    Map raw statement text to its StatementClass.

    This is a syntactic prefix check, not a parser: ``"select"`` matches
    ``SELECT * FROM t`` as well as ``selected_garbage``. Deciding whether the
    statement is valid SQL is left to the database.

    Never raises; anything that matches no prefix (including non-string
    input) is UNKNOWN.

    Example:
        >>> classify("  SELECT * FROM test_users")
        <StatementClass.READ: 'read'>
        >>> classify("DROP TABLE test_users")
        <StatementClass.UNKNOWN: 'unknown'>
    """
    if not isinstance(text, str):
        return StatementClass.UNKNOWN

    normalized = normalize_statement(text)
    for prefix, statement_class in _PREFIXES:
        if normalized.startswith(prefix):
            return statement_class
    return StatementClass.UNKNOWN
