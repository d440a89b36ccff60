from enum import IntEnum


class ErrorCode(IntEnum):
    """JSON-RPC error codes used on the protocol error channel."""

    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602


class QuerygateError(Exception):
    """Base exception for querygate errors."""


class ProtocolError(QuerygateError):
    """A caller error reported through the error channel, not the content envelope."""

    code: ErrorCode = ErrorCode.INVALID_PARAMS

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnknownOperationError(ProtocolError):
    """No operation is registered under the requested name."""

    code = ErrorCode.METHOD_NOT_FOUND


class InvalidArgumentsError(ProtocolError):
    """Arguments are not a record with a non-empty string `query`."""


class StatementClassMismatchError(ProtocolError):
    """The statement does not belong to the class the operation permits."""
