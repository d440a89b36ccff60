__version__ = "1.0.0"

from .classify import StatementClass, classify
from .config import DbConfig
from .db.pool import ConnectionPool, StatementPool
from .gateway import CommandGateway
from .models import ExecutionRequest, ExecutionResult, Failure, FailureKind, Success
from .registry import OPERATIONS, Operation, lookup

__all__ = [
    "CommandGateway",
    "ConnectionPool",
    "StatementPool",
    "DbConfig",
    "ExecutionRequest",
    "ExecutionResult",
    "Success",
    "Failure",
    "FailureKind",
    "Operation",
    "OPERATIONS",
    "StatementClass",
    "classify",
    "lookup",
]
