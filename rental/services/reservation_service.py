"""
Reservation persistence and existence lookups used by the transactions.
"""

from datetime import date

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Client, Reservation, Vehicle


async def client_exists(session: AsyncSession, client_id: str) -> bool:
    result = await session.execute(select(Client.nif).where(Client.nif == client_id))
    return result.scalar_one_or_none() is not None


async def vehicle_exists(session: AsyncSession, vehicle_plate: str) -> bool:
    result = await session.execute(
        select(Vehicle.matricula).where(Vehicle.matricula == vehicle_plate)
    )
    return result.scalar_one_or_none() is not None


async def get_reservation(session: AsyncSession, reservation_id: int) -> Reservation | None:
    """Fetch a reservation with a row lock, or None if it does not exist."""
    result = await session.execute(
        select(Reservation)
        .where(Reservation.id_reserva == reservation_id)
        .with_for_update()
    )
    return result.scalar_one_or_none()


async def insert_reservation(
    session: AsyncSession,
    reservation_id: int,
    client_id: str,
    vehicle_plate: str,
    start_date: date,
    end_date: date | None,
) -> int:
    """
    Insert a reservation row. end_date is stored as given (NULL = default duration).

    Returns:
        Number of rows inserted
    """
    result = await session.execute(
        insert(Reservation).values(
            id_reserva=reservation_id,
            cliente=client_id,
            matricula=vehicle_plate,
            fecha_ini=start_date,
            fecha_fin=end_date,
        )
    )
    return result.rowcount


async def delete_reservation(session: AsyncSession, reservation_id: int) -> int:
    """Delete a reservation. Returns the number of rows deleted."""
    result = await session.execute(
        delete(Reservation).where(Reservation.id_reserva == reservation_id)
    )
    return result.rowcount
