"""Helpers for classifying driver errors wrapped by SQLAlchemy."""

from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError

FOREIGN_KEY_VIOLATION = "23503"
SERIALIZATION_FAILURE = "40001"


def get_sqlstate(error: SQLAlchemyError) -> str | None:
    """
    Return the SQLSTATE code reported by the driver, if any.

    asyncpg exposes it as `sqlstate`, psycopg as `pgcode`; the asyncpg
    adapter also carries it on the wrapped exception.
    """
    if not isinstance(error, DBAPIError) or error.orig is None:
        return None

    orig = error.orig
    for attr in ("sqlstate", "pgcode"):
        code = getattr(orig, attr, None)
        if code:
            return str(code)

    cause = getattr(orig, "__cause__", None)
    code = getattr(cause, "sqlstate", None)
    return str(code) if code else None


def is_foreign_key_violation(error: SQLAlchemyError) -> bool:
    """True when the error is a foreign key violation on insert/update."""
    if not isinstance(error, IntegrityError):
        return False
    if get_sqlstate(error) == FOREIGN_KEY_VIOLATION:
        return True
    # SQLite reports no SQLSTATE
    return "FOREIGN KEY constraint failed" in str(error.orig)
