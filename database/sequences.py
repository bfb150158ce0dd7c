"""
Sequence allocation for reservation IDs and invoice numbers.

Counters live in the `secuencias` table and are incremented with
UPDATE ... RETURNING inside the caller's transaction. The row lock taken by
the UPDATE serializes concurrent allocations, and a rollback gives the
number back.
"""

import logging

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import SequenceCounter

logger = logging.getLogger(__name__)

RESERVATION_SEQUENCE = "seq_reservas"
INVOICE_SEQUENCE = "seq_num_fact"

ALL_SEQUENCES = (RESERVATION_SEQUENCE, INVOICE_SEQUENCE)


async def next_value(session: AsyncSession, name: str) -> int | None:
    """
    Increment counter `name` and return its new value.

    Args:
        session: Session with an active transaction
        name: Counter name (see ALL_SEQUENCES)

    Returns:
        The allocated value, or None if the counter row does not exist.
    """
    stmt = (
        update(SequenceCounter)
        .where(SequenceCounter.nombre == name)
        .values(valor=SequenceCounter.valor + 1)
        .returning(SequenceCounter.valor)
    )
    result = await session.execute(stmt)
    value = result.scalar_one_or_none()

    if value is None:
        logger.error(f"Sequence counter '{name}' is not initialized")
        return None

    return value


async def next_reservation_id(session: AsyncSession) -> int | None:
    return await next_value(session, RESERVATION_SEQUENCE)


async def next_invoice_number(session: AsyncSession) -> int | None:
    return await next_value(session, INVOICE_SEQUENCE)
