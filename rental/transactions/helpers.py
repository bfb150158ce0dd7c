"""
Rollback and failure-reporting helpers shared by the transaction handlers.
"""

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from database.errors import get_sqlstate
from rental.errors import ErrorCode, TransactionResult

logger = logging.getLogger(__name__)


async def safe_rollback(session: AsyncSession, trace_id: str, operation: str) -> None:
    """Roll back, logging (not raising) a failure to do so."""
    try:
        await session.rollback()
    except SQLAlchemyError:
        logger.critical(
            f"[{trace_id}] Rollback failed",
            extra={"trace_id": trace_id, "operation": operation},
            exc_info=True
        )


async def abort(
    session: AsyncSession,
    trace_id: str,
    operation: str,
    error_code: ErrorCode,
    **details: Any,
) -> TransactionResult:
    """Roll back after a business rule violation and build the failed result."""
    await safe_rollback(session, trace_id, operation)
    logger.warning(
        f"[{trace_id}] {operation} rejected: {error_code.value}",
        extra={"trace_id": trace_id, "operation": operation, "error_code": error_code.value}
    )
    return TransactionResult.failure(error_code, **details)


async def storage_failure(
    session: AsyncSession,
    trace_id: str,
    operation: str,
    error: SQLAlchemyError,
    **context: Any,
) -> TransactionResult:
    """Log a store error with its SQLSTATE, roll back, and report STORAGE_ERROR."""
    sqlstate = get_sqlstate(error)
    logger.error(
        f"[{trace_id}] Database error during {operation} (sqlstate={sqlstate})",
        extra={"trace_id": trace_id, "operation": operation, "error_code": ErrorCode.STORAGE_ERROR.value, **context},
        exc_info=True
    )
    await safe_rollback(session, trace_id, operation)
    return TransactionResult.failure(ErrorCode.STORAGE_ERROR, sqlstate=sqlstate, error=str(error))
