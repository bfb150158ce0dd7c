"""
Reservation Transaction Handler.

Creates a vehicle reservation and its invoice in one atomic transaction:
- Business rule validation (client, vehicle pricing, rental days, availability)
- Reservation row (end date stored as given, NULL = default duration)
- Invoice with two lines (rental days + full fuel tank)

Either every row (and both counter increments) is committed, or the
transaction is rolled back and nothing is visible.

ReservationTransaction.execute() is the single entry point for creating
reservations. It's called by BookingEngine.create_reservation().
"""

import logging
from datetime import date

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from database.connection import get_async_session
from database.errors import is_foreign_key_violation
from database.sequences import next_invoice_number, next_reservation_id
from rental.errors import ErrorCode, TransactionResult
from rental.services.invoice_service import (
    build_invoice_lines,
    insert_invoice,
    insert_invoice_line,
)
from rental.services.pricing_service import compute_invoice_amounts, get_vehicle_pricing
from rental.services.reservation_service import client_exists, insert_reservation
from rental.transactions.helpers import abort, safe_rollback, storage_failure
from rental.utils.rental_period import effective_end, rental_end_from, stored_end
from rental.validators.transaction_validators import (
    validate_rental_days,
    validate_vehicle_availability,
)

logger = logging.getLogger(__name__)

OPERATION = "create_reservation"


class ReservationTransaction:
    """
    Atomic transaction handler for creating reservations.

    This class encapsulates the complete booking flow:
    1. Validate start date is present
    2. Check client exists
    3. Resolve vehicle pricing (locks the vehicle row)
    4. Validate rental days (default duration when no end date)
    5. Validate vehicle availability over the effective interval
    6. Insert reservation, invoice and invoice lines
    7. Commit, or roll back everything if any step fails

    Args:
        session_factory: Callable returning an async context manager that
            yields an AsyncSession (defaults to database.connection.get_async_session)
    """

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_async_session

    async def execute(
        self,
        client_id: str,
        vehicle_plate: str,
        start_date: date | None,
        end_date: date | None = None,
    ) -> TransactionResult:
        """
        Execute atomic reservation transaction.

        Args:
            client_id: Client NIF
            vehicle_plate: Licence plate
            start_date: First day of the rental (required)
            end_date: Day the vehicle is returned (exclusive); None books the
                default duration and stores a NULL end date

        Returns:
            TransactionResult. On success carries reservation_id, invoice_number,
            total, days and effective_end. On failure carries error_code
            (INVALID_INPUT, CLIENT_NOT_FOUND, VEHICLE_NOT_FOUND, NO_RENTAL_DAYS,
            VEHICLE_OCCUPIED or STORAGE_ERROR), error_message and details.

        Example:
            >>> result = await ReservationTransaction().execute(
            ...     client_id="12345678A",
            ...     vehicle_plate="1234-ABC",
            ...     start_date=date(2024, 3, 1),
            ... )
            >>> result.effective_end
            datetime.date(2024, 3, 5)
        """
        trace_id = f"{client_id}_{vehicle_plate}_{start_date.isoformat() if start_date else 'none'}"
        log_context = {
            "trace_id": trace_id,
            "operation": OPERATION,
            "client_id": client_id,
            "vehicle_plate": vehicle_plate,
        }
        logger.info(
            f"[{trace_id}] Starting reservation transaction",
            extra={**log_context, "end_date": end_date.isoformat() if end_date else None}
        )

        # Step 1: Start date is required
        if start_date is None:
            logger.warning(f"[{trace_id}] Start date missing", extra=log_context)
            return TransactionResult.failure(ErrorCode.INVALID_INPUT, missing_field="start_date")

        rental_end = rental_end_from(end_date)

        async with self._session_factory() as session:
            try:
                # Step 2: Client must exist
                if not await client_exists(session, client_id):
                    return await abort(
                        session, trace_id, OPERATION, ErrorCode.CLIENT_NOT_FOUND,
                        client_id=client_id
                    )

                # Step 3: Vehicle pricing (row lock on the vehicle serializes
                # concurrent bookings of it until commit)
                pricing = await get_vehicle_pricing(session, vehicle_plate, lock_vehicle=True)
                if pricing is None:
                    return await abort(
                        session, trace_id, OPERATION, ErrorCode.VEHICLE_NOT_FOUND,
                        vehicle_plate=vehicle_plate
                    )

                # Step 4: Rental days
                validation_days = validate_rental_days(start_date, rental_end)
                if not validation_days["valid"]:
                    return await abort(
                        session, trace_id, OPERATION, validation_days["error_code"],
                        days=validation_days["days"]
                    )
                days = validation_days["days"]
                end = effective_end(start_date, rental_end)

                # Step 5: Availability over [start, effective end)
                validation_slot = await validate_vehicle_availability(
                    vehicle_plate=vehicle_plate,
                    start_date=start_date,
                    end_date=end,
                    session=session,
                )
                if not validation_slot["available"]:
                    return await abort(
                        session, trace_id, OPERATION, ErrorCode.VEHICLE_OCCUPIED,
                        conflicting_reservation_id=validation_slot["conflicting_reservation_id"]
                    )

                # Step 6a: Reservation row
                reservation_id = await next_reservation_id(session)
                if reservation_id is None:
                    return await abort(
                        session, trace_id, OPERATION, ErrorCode.STORAGE_ERROR,
                        error="reservation sequence unavailable"
                    )

                inserted = await insert_reservation(
                    session,
                    reservation_id=reservation_id,
                    client_id=client_id,
                    vehicle_plate=vehicle_plate,
                    start_date=start_date,
                    end_date=stored_end(rental_end),
                )
                if inserted != 1:
                    return await abort(
                        session, trace_id, OPERATION, ErrorCode.STORAGE_ERROR,
                        error="reservation insert affected no rows"
                    )

                # Step 6b: Invoice and its two lines
                amounts = compute_invoice_amounts(pricing, days)

                invoice_number = await next_invoice_number(session)
                if invoice_number is None:
                    return await abort(
                        session, trace_id, OPERATION, ErrorCode.STORAGE_ERROR,
                        error="invoice sequence unavailable"
                    )

                if await insert_invoice(session, invoice_number, client_id, amounts.total) != 1:
                    return await abort(
                        session, trace_id, OPERATION, ErrorCode.STORAGE_ERROR,
                        error="invoice insert affected no rows"
                    )

                for description, amount in build_invoice_lines(pricing, days, amounts):
                    if await insert_invoice_line(session, invoice_number, description, amount) != 1:
                        return await abort(
                            session, trace_id, OPERATION, ErrorCode.STORAGE_ERROR,
                            error=f"invoice line insert affected no rows: {description}"
                        )

                # Step 7: Commit
                await session.commit()

                logger.info(
                    f"[{trace_id}] Reservation committed",
                    extra={
                        **log_context,
                        "reservation_id": reservation_id,
                        "invoice_number": invoice_number,
                        "total": str(amounts.total),
                    }
                )

                return TransactionResult(
                    success=True,
                    reservation_id=reservation_id,
                    invoice_number=invoice_number,
                    total=amounts.total,
                    days=days,
                    effective_end=end,
                )

            except IntegrityError as e:
                # A client deleted after the existence check surfaces as a
                # foreign key violation on insert
                if is_foreign_key_violation(e):
                    logger.error(
                        f"[{trace_id}] Foreign key violation on insert, client no longer exists",
                        extra=log_context,
                        exc_info=True
                    )
                    await safe_rollback(session, trace_id, OPERATION)
                    return TransactionResult.failure(ErrorCode.CLIENT_NOT_FOUND, client_id=client_id)
                return await storage_failure(session, trace_id, OPERATION, e, client_id=client_id, vehicle_plate=vehicle_plate)

            except SQLAlchemyError as e:
                return await storage_failure(session, trace_id, OPERATION, e, client_id=client_id, vehicle_plate=vehicle_plate)

            except Exception:
                logger.error(
                    f"[{trace_id}] Unexpected error in reservation transaction",
                    extra=log_context,
                    exc_info=True
                )
                await safe_rollback(session, trace_id, OPERATION)
                raise
