from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .classify import StatementClass


def _query_schema(verb: str) -> Mapping[str, Any]:
    return MappingProxyType(
        {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "minLength": 1,
                    "description": f"The SQL {verb} query to execute.",
                },
            },
            "required": ["query"],
        }
    )


@dataclass(frozen=True)
class Operation:
    """
    A named operation exposed to callers.

    Each operation permits exactly one StatementClass. `verb` is the SQL
    keyword shown to callers in schemas and rejection messages, and
    `success_message` is reported for mutating statements.
    """

    name: str
    description: str
    allowed_class: StatementClass
    verb: str
    success_message: Optional[str] = None
    input_schema: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @property
    def is_read(self) -> bool:
        return self.allowed_class == StatementClass.READ


def _operation(
    name: str,
    description: str,
    allowed_class: StatementClass,
    verb: str,
    success_message: Optional[str] = None,
) -> Operation:
    return Operation(
        name=name,
        description=description,
        allowed_class=allowed_class,
        verb=verb,
        success_message=success_message,
        input_schema=_query_schema(verb),
    )


_DEFINITIONS: tuple[Operation, ...] = (
    _operation(
        "run_sql_query",
        "Executes a read-only SQL query (SELECT statements only) against the MySQL database.",
        StatementClass.READ,
        "SELECT",
    ),
    _operation(
        "create_table",
        "Creates a new table in the MySQL database.",
        StatementClass.CREATE_TABLE,
        "CREATE TABLE",
        "Table created successfully",
    ),
    _operation(
        "insert_data",
        "Inserts data into a table in the MySQL database.",
        StatementClass.INSERT,
        "INSERT INTO",
        "Data inserted successfully",
    ),
    _operation(
        "update_data",
        "Updates data in a table in the MySQL database.",
        StatementClass.UPDATE,
        "UPDATE",
        "Data updated successfully",
    ),
    _operation(
        "delete_data",
        "Deletes data from a table in the MySQL database.",
        StatementClass.DELETE,
        "DELETE FROM",
        "Data deleted successfully",
    ),
)

OPERATIONS: Mapping[str, Operation] = MappingProxyType({op.name: op for op in _DEFINITIONS})


def lookup(name: Any) -> Optional[Operation]:
    """Return the operation registered under `name`, or None."""
    if not isinstance(name, str):
        return None
    return OPERATIONS.get(name)


def list_operations() -> list[Operation]:
    """All operations, in registration order."""
    return list(_DEFINITIONS)
