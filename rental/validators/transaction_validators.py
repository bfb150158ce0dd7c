"""
Transaction Validators for Reservation Business Rules.

Validators that check business constraints inside the reservation and
cancellation transactions. Each returns a dict describing the outcome; the
transaction decides whether to roll back.
"""

import logging
from datetime import date
from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Reservation
from rental.errors import ERROR_MESSAGES, ErrorCode
from rental.utils.rental_period import (
    RentalEnd,
    effective_end,
    intervals_overlap,
    rental_days,
    rental_end_from,
)

logger = logging.getLogger(__name__)


def validate_rental_days(start_date: date, rental_end: RentalEnd) -> dict[str, Any]:
    """
    Validate that the rental lasts at least one whole day.

    Args:
        start_date: First day of the rental
        rental_end: FixedEnd or DefaultDuration

    Returns:
        dict with validation result:
            {
                "valid": bool,
                "error_code": ErrorCode | None,  # NO_RENTAL_DAYS, or INVALID_INPUT past date.max
                "error_message": str | None,
                "days": int
            }

    Example:
        >>> validate_rental_days(date(2024, 1, 10), FixedEnd(date(2024, 1, 10)))
        {"valid": False, "error_code": ErrorCode.NO_RENTAL_DAYS, ..., "days": 0}
    """
    days = rental_days(start_date, rental_end)

    try:
        effective_end(start_date, rental_end)
    except OverflowError:
        logger.warning(
            f"Rental from {start_date} ends past the last representable date",
            extra={"error_code": ErrorCode.INVALID_INPUT.value}
        )
        return {
            "valid": False,
            "error_code": ErrorCode.INVALID_INPUT,
            "error_message": ERROR_MESSAGES[ErrorCode.INVALID_INPUT],
            "days": days,
        }

    if days < 1:
        logger.warning(
            f"Rental days validation failed: {days} day(s) from {start_date}",
            extra={"error_code": ErrorCode.NO_RENTAL_DAYS.value}
        )
        return {
            "valid": False,
            "error_code": ErrorCode.NO_RENTAL_DAYS,
            "error_message": ERROR_MESSAGES[ErrorCode.NO_RENTAL_DAYS],
            "days": days,
        }

    return {"valid": True, "error_code": None, "error_message": None, "days": days}


async def validate_vehicle_availability(
    vehicle_plate: str,
    start_date: date,
    end_date: date,
    session: AsyncSession,
    exclude_reservation_id: int | None = None,
) -> dict[str, Any]:
    """
    Validate that no reservation of the vehicle overlaps [start_date, end_date).

    Reservations without an end date are checked over their default duration.
    Boundaries are strict: a reservation ending on start_date, or starting on
    end_date, is not a conflict.

    Args:
        vehicle_plate: Licence plate
        start_date: First day requested
        end_date: Effective end date (exclusive)
        session: SQLAlchemy async session (must be in active transaction)
        exclude_reservation_id: Reservation to ignore (the one being cancelled)

    Returns:
        dict with validation result:
            {
                "available": bool,
                "error_code": ErrorCode | None,  # VEHICLE_OCCUPIED if taken
                "error_message": str | None,
                "conflicting_reservation_id": int | None
            }

    Notes:
        - Uses SELECT FOR UPDATE to lock candidate rows
        - The SQL filter only narrows candidates; the overlap decision is made
          by intervals_overlap() on each effective interval
    """
    stmt = (
        select(Reservation)
        .where(Reservation.matricula == vehicle_plate)
        # Existing reservation starts before our end
        .where(Reservation.fecha_ini < end_date)
        # Existing reservation ends after our start (NULL ends decided below)
        .where(or_(Reservation.fecha_fin.is_(None), Reservation.fecha_fin > start_date))
        .order_by(Reservation.fecha_ini)
        .with_for_update()
    )
    if exclude_reservation_id is not None:
        stmt = stmt.where(Reservation.id_reserva != exclude_reservation_id)

    result = await session.execute(stmt)
    candidates = list(result.scalars().all())

    for reservation in candidates:
        existing_end = effective_end(reservation.fecha_ini, rental_end_from(reservation.fecha_fin))
        if intervals_overlap(start_date, end_date, reservation.fecha_ini, existing_end):
            logger.warning(
                f"Vehicle conflict detected: {start_date} - {end_date}",
                extra={
                    "vehicle_plate": vehicle_plate,
                    "reservation_id": reservation.id_reserva,
                    "conflict_start": reservation.fecha_ini.isoformat(),
                    "conflict_end": existing_end.isoformat(),
                }
            )
            return {
                "available": False,
                "error_code": ErrorCode.VEHICLE_OCCUPIED,
                "error_message": ERROR_MESSAGES[ErrorCode.VEHICLE_OCCUPIED],
                "conflicting_reservation_id": reservation.id_reserva,
            }

    logger.info(
        f"Vehicle available: {start_date} - {end_date}",
        extra={"vehicle_plate": vehicle_plate}
    )

    return {
        "available": True,
        "error_code": None,
        "error_message": None,
        "conflicting_reservation_id": None,
    }


def validate_reservation_details(
    reservation: Reservation,
    client_id: str,
    vehicle_plate: str,
    start_date: date,
    end_date: date,
) -> dict[str, Any]:
    """
    Check that the caller's data matches the stored reservation.

    A stored reservation without end date matches the end date of its default
    duration (start + DEFAULT_RENTAL_DAYS).

    Returns:
        dict with validation result:
            {
                "valid": bool,
                "error_code": ErrorCode | None,  # DATA_MISMATCH if invalid
                "error_message": str | None,
                "mismatched_fields": list[str]
            }
    """
    stored_effective_end = effective_end(reservation.fecha_ini, rental_end_from(reservation.fecha_fin))

    comparisons = {
        "client_id": (reservation.cliente, client_id),
        "vehicle_plate": (reservation.matricula, vehicle_plate),
        "start_date": (reservation.fecha_ini, start_date),
        "end_date": (stored_effective_end, end_date),
    }
    mismatched = [name for name, (stored, given) in comparisons.items() if stored != given]

    if mismatched:
        logger.warning(
            f"Reservation data mismatch on fields: {mismatched}",
            extra={"reservation_id": reservation.id_reserva}
        )
        return {
            "valid": False,
            "error_code": ErrorCode.DATA_MISMATCH,
            "error_message": ERROR_MESSAGES[ErrorCode.DATA_MISMATCH],
            "mismatched_fields": mismatched,
        }

    return {"valid": True, "error_code": None, "error_message": None, "mismatched_fields": []}
