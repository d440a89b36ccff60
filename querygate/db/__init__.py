from .errors import database_error_message, is_database_error
from .pool import ConnectionPool, StatementPool, create_pool_engine
from .session import DbSession

__all__ = [
    "DbSession",
    "ConnectionPool",
    "StatementPool",
    "create_pool_engine",
    "is_database_error",
    "database_error_message",
]
