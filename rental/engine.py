"""
Booking engine - Entry point for reservation and cancellation.

Both operations share one injected session provider, so a caller (or a test)
decides which database the engine works against.
"""

from datetime import date

from rental.errors import TransactionResult
from rental.transactions.cancellation_transaction import CancellationTransaction
from rental.transactions.reservation_transaction import ReservationTransaction


class BookingEngine:
    """
    Facade over ReservationTransaction and CancellationTransaction.

    Example:
        >>> engine = BookingEngine()
        >>> result = await engine.create_reservation("12345678A", "1234-ABC", date(2024, 1, 10), date(2024, 1, 14))
        >>> if result.success:
        ...     await engine.cancel_reservation(str(result.reservation_id), "12345678A", "1234-ABC",
        ...                                     date(2024, 1, 10), date(2024, 1, 14))
    """

    def __init__(self, session_factory=None):
        self._reservations = ReservationTransaction(session_factory)
        self._cancellations = CancellationTransaction(session_factory)

    async def create_reservation(
        self,
        client_id: str,
        vehicle_plate: str,
        start_date: date | None,
        end_date: date | None = None,
    ) -> TransactionResult:
        return await self._reservations.execute(client_id, vehicle_plate, start_date, end_date)

    async def cancel_reservation(
        self,
        reservation_id: str,
        client_id: str,
        vehicle_plate: str,
        start_date: date | None,
        end_date: date | None,
    ) -> TransactionResult:
        return await self._cancellations.execute(
            reservation_id, client_id, vehicle_plate, start_date, end_date
        )
