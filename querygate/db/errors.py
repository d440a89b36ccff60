from __future__ import annotations

from sqlalchemy.exc import DBAPIError


def is_database_error(exc: BaseException) -> bool:
    """
    True if `exc` is a rejection raised by the database driver.

    SQLAlchemy wraps every DB-API exception (syntax errors, constraint
    violations, permission denials, lost connections) in DBAPIError. Anything
    else, including SQLAlchemy's own pool TimeoutError, is a framework fault.
    """
    return isinstance(exc, DBAPIError)


def database_error_message(exc: DBAPIError) -> str:
    """
    The driver's own message, without SQLAlchemy's statement/background suffix.

    PyMySQL-style errors carry ``(errno, message)`` args; only the message is
    kept.
    """
    orig = exc.orig
    if orig is None:
        return str(exc)
    args = getattr(orig, "args", ())
    if len(args) == 2 and isinstance(args[0], int):
        return str(args[1])
    return str(orig)
