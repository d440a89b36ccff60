from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union

from .errors import (
    ErrorCode,
    InvalidArgumentsError,
    ProtocolError,
    StatementClassMismatchError,
    UnknownOperationError,
)


@dataclass(frozen=True)
class ExecutionRequest:
    """
    A single incoming call as delivered by the transport.

    `raw_arguments` is untrusted; use `query()` to obtain the validated
    statement text.
    """

    operation_name: str
    raw_arguments: Any = None

    def query(self) -> str:
        """
        Return the `query` argument.

        Raises:
            InvalidArgumentsError: If the arguments are not a mapping holding
                a non-empty string `query`
        """
        args = self.raw_arguments
        if not isinstance(args, Mapping):
            raise InvalidArgumentsError("Invalid SQL query arguments.")
        query = args.get("query")
        if not isinstance(query, str) or not query.strip():
            raise InvalidArgumentsError("Invalid SQL query arguments.")
        return query


class FailureKind(str, Enum):
    UNKNOWN_OPERATION = "unknown_operation"
    INVALID_ARGUMENTS = "invalid_arguments"
    STATEMENT_CLASS_MISMATCH = "statement_class_mismatch"
    DATABASE_ERROR = "database_error"


_PROTOCOL_ERRORS: dict[FailureKind, type[ProtocolError]] = {
    FailureKind.UNKNOWN_OPERATION: UnknownOperationError,
    FailureKind.INVALID_ARGUMENTS: InvalidArgumentsError,
    FailureKind.STATEMENT_CLASS_MISMATCH: StatementClassMismatchError,
}


@dataclass(frozen=True)
class Success:
    payload: Any


@dataclass(frozen=True)
class Failure:
    """
    A call that did not produce a payload.

    Operational failures (`is_operational=True`) are rejections raised by the
    database and are reported to the caller as data. All other failures are
    protocol errors: the caller asked for something the gateway refuses.
    """

    kind: FailureKind
    message: str

    @property
    def is_operational(self) -> bool:
        return self.kind == FailureKind.DATABASE_ERROR

    @property
    def code(self) -> Optional[ErrorCode]:
        error_cls = _PROTOCOL_ERRORS.get(self.kind)
        return error_cls.code if error_cls is not None else None

    def to_exception(self) -> ProtocolError:
        """
        Build the ProtocolError matching this failure.

        Raises:
            ValueError: If called on an operational failure
        """
        error_cls = _PROTOCOL_ERRORS.get(self.kind)
        if error_cls is None:
            raise ValueError(f"{self.kind.value} is not a protocol failure")
        return error_cls(self.message)

    @classmethod
    def from_exception(cls, exc: ProtocolError) -> "Failure":
        for kind, error_cls in _PROTOCOL_ERRORS.items():
            if type(exc) is error_cls:
                return cls(kind=kind, message=exc.message)
        raise ValueError(f"Unsupported protocol error type: {type(exc).__name__}")


ExecutionResult = Union[Success, Failure]
