"""
Cancellation Transaction Handler.

Undoes a reservation created by ReservationTransaction in one atomic
transaction. The caller must repeat the reservation's client, vehicle and
dates as confirmation; the invoice is located by client and recomputed
amount and deleted together with the reservation.
"""

import logging
from datetime import date

from sqlalchemy.exc import SQLAlchemyError

from database.connection import get_async_session
from rental.errors import ErrorCode, TransactionResult
from rental.services.invoice_service import delete_invoice, find_invoice_for_cancellation
from rental.services.pricing_service import compute_invoice_amounts, get_vehicle_pricing
from rental.services.reservation_service import (
    client_exists,
    delete_reservation,
    get_reservation,
    vehicle_exists,
)
from rental.transactions.helpers import abort, safe_rollback, storage_failure
from rental.utils.rental_period import FixedEnd, effective_end, rental_days, rental_end_from
from rental.validators.transaction_validators import (
    validate_rental_days,
    validate_reservation_details,
    validate_vehicle_availability,
)

logger = logging.getLogger(__name__)

OPERATION = "cancel_reservation"

# reservas.id_reserva is a 32-bit INTEGER
MAX_RESERVATION_ID = 2**31 - 1


def parse_reservation_id(raw_id: str | int | None) -> int | None:
    """Parse a reservation ID given as text; None unless it is a storable positive integer."""
    if raw_id is None or isinstance(raw_id, bool):
        return None
    try:
        parsed = int(str(raw_id).strip())
    except ValueError:
        return None
    if not 1 <= parsed <= MAX_RESERVATION_ID:
        return None
    return parsed


class CancellationTransaction:
    """
    Atomic transaction handler for cancelling reservations.

    Flow:
    1. Validate both dates are present and span at least one day
    2. Load the reservation (row lock) and compare it with the caller's data
    3. Check client and vehicle still exist
    4. Re-validate that no other reservation overlaps this one
    5. Delete the matching invoice (if exactly one matches), then the reservation
    6. Commit, or roll back everything if any step fails

    Args:
        session_factory: Callable returning an async context manager that
            yields an AsyncSession (defaults to database.connection.get_async_session)
    """

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_async_session

    async def execute(
        self,
        reservation_id: str,
        client_id: str,
        vehicle_plate: str,
        start_date: date | None,
        end_date: date | None,
    ) -> TransactionResult:
        """
        Execute atomic cancellation transaction.

        Args:
            reservation_id: Reservation ID as text (must parse as an integer)
            client_id: Client NIF the reservation was made for
            vehicle_plate: Licence plate of the reserved vehicle
            start_date: Reservation start date
            end_date: Reservation effective end date; for a reservation made
                without end date this is start_date + DEFAULT_RENTAL_DAYS

        Returns:
            TransactionResult. On success carries reservation_id and the
            deleted invoice_number (None when no invoice matched). On failure
            carries error_code (INVALID_INPUT, NO_RENTAL_DAYS,
            RESERVATION_NOT_FOUND, DATA_MISMATCH, CLIENT_NOT_FOUND,
            VEHICLE_NOT_FOUND, VEHICLE_OCCUPIED, AMBIGUOUS_INVOICE or
            STORAGE_ERROR).
        """
        trace_id = f"{reservation_id}_{client_id}_{vehicle_plate}"
        log_context = {
            "trace_id": trace_id,
            "operation": OPERATION,
            "client_id": client_id,
            "vehicle_plate": vehicle_plate,
        }
        logger.info(f"[{trace_id}] Starting cancellation transaction", extra=log_context)

        # Step 1: Both dates are required
        if start_date is None or end_date is None:
            missing = [name for name, value in (("start_date", start_date), ("end_date", end_date)) if value is None]
            logger.warning(f"[{trace_id}] Dates missing: {missing}", extra=log_context)
            return TransactionResult.failure(ErrorCode.INVALID_INPUT, missing_fields=missing)

        # Step 2: At least one rental day
        validation_days = validate_rental_days(start_date, FixedEnd(end_date))
        if not validation_days["valid"]:
            return TransactionResult.failure(validation_days["error_code"], days=validation_days["days"])

        # Step 3a: Reservation ID must be numeric
        parsed_id = parse_reservation_id(reservation_id)
        if parsed_id is None:
            logger.warning(f"[{trace_id}] Reservation ID '{reservation_id}' is not a number", extra=log_context)
            return TransactionResult.failure(ErrorCode.RESERVATION_NOT_FOUND, reservation_id=reservation_id)

        async with self._session_factory() as session:
            try:
                # Step 3b: Reservation must exist (locked until commit)
                reservation = await get_reservation(session, parsed_id)
                if reservation is None:
                    return await abort(
                        session, trace_id, OPERATION, ErrorCode.RESERVATION_NOT_FOUND,
                        reservation_id=parsed_id
                    )

                # Step 4: Caller data must match the stored reservation
                validation_details = validate_reservation_details(
                    reservation, client_id, vehicle_plate, start_date, end_date
                )
                if not validation_details["valid"]:
                    return await abort(
                        session, trace_id, OPERATION, ErrorCode.DATA_MISMATCH,
                        mismatched_fields=validation_details["mismatched_fields"]
                    )

                # Step 5: Client must still exist
                if not await client_exists(session, client_id):
                    return await abort(
                        session, trace_id, OPERATION, ErrorCode.CLIENT_NOT_FOUND,
                        client_id=client_id
                    )

                # Step 6: Vehicle must still exist
                if not await vehicle_exists(session, vehicle_plate):
                    return await abort(
                        session, trace_id, OPERATION, ErrorCode.VEHICLE_NOT_FOUND,
                        vehicle_plate=vehicle_plate
                    )

                # Step 7: No other reservation may overlap this one
                stored_rental_end = rental_end_from(reservation.fecha_fin)
                validation_slot = await validate_vehicle_availability(
                    vehicle_plate=reservation.matricula,
                    start_date=reservation.fecha_ini,
                    end_date=effective_end(reservation.fecha_ini, stored_rental_end),
                    session=session,
                    exclude_reservation_id=parsed_id,
                )
                if not validation_slot["available"]:
                    return await abort(
                        session, trace_id, OPERATION, ErrorCode.VEHICLE_OCCUPIED,
                        conflicting_reservation_id=validation_slot["conflicting_reservation_id"]
                    )

                # Step 8: Recompute the invoice total from the stored reservation
                pricing = await get_vehicle_pricing(session, reservation.matricula)
                if pricing is None:
                    return await abort(
                        session, trace_id, OPERATION, ErrorCode.VEHICLE_NOT_FOUND,
                        vehicle_plate=reservation.matricula
                    )
                original_days = max(rental_days(reservation.fecha_ini, stored_rental_end), 1)
                expected_total = compute_invoice_amounts(pricing, original_days).total

                # Step 9: Delete the invoice, refusing to guess between several
                invoice_match = await find_invoice_for_cancellation(
                    session, reservation.cliente, expected_total
                )
                if invoice_match["ambiguous"]:
                    return await abort(
                        session, trace_id, OPERATION, ErrorCode.AMBIGUOUS_INVOICE,
                        expected_total=str(expected_total),
                        matching_invoices=invoice_match["matching_invoices"]
                    )

                invoice_number = invoice_match["invoice_number"]
                if invoice_number is not None:
                    if await delete_invoice(session, invoice_number) != 1:
                        return await abort(
                            session, trace_id, OPERATION, ErrorCode.STORAGE_ERROR,
                            error=f"invoice {invoice_number} delete affected no rows"
                        )
                    logger.info(
                        f"[{trace_id}] Invoice {invoice_number} deleted",
                        extra={**log_context, "invoice_number": invoice_number}
                    )
                else:
                    logger.warning(
                        f"[{trace_id}] No invoice found for reservation {parsed_id}, "
                        f"cancelling without deleting an invoice",
                        extra={**log_context, "reservation_id": parsed_id}
                    )

                # Step 10: Delete the reservation
                if await delete_reservation(session, parsed_id) != 1:
                    return await abort(
                        session, trace_id, OPERATION, ErrorCode.STORAGE_ERROR,
                        error=f"reservation {parsed_id} delete affected no rows"
                    )

                await session.commit()

                logger.info(
                    f"[{trace_id}] Cancellation committed",
                    extra={**log_context, "reservation_id": parsed_id, "invoice_number": invoice_number}
                )

                return TransactionResult(
                    success=True,
                    reservation_id=parsed_id,
                    invoice_number=invoice_number,
                )

            except SQLAlchemyError as e:
                return await storage_failure(
                    session, trace_id, OPERATION, e,
                    reservation_id=parsed_id, client_id=client_id, vehicle_plate=vehicle_plate
                )

            except Exception:
                logger.error(
                    f"[{trace_id}] Unexpected error in cancellation transaction",
                    extra={**log_context, "reservation_id": parsed_id},
                    exc_info=True
                )
                await safe_rollback(session, trace_id, OPERATION)
                raise
