"""
Error codes and result type for booking transactions.

Business rule violations are reported through TransactionResult rather than
raised, so callers always receive a specific error code and message.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum as PyEnum
from typing import Any


class ErrorCode(str, PyEnum):
    """Failure kinds reported by reservation and cancellation."""

    INVALID_INPUT = "INVALID_INPUT"
    CLIENT_NOT_FOUND = "CLIENT_NOT_FOUND"
    VEHICLE_NOT_FOUND = "VEHICLE_NOT_FOUND"
    NO_RENTAL_DAYS = "NO_RENTAL_DAYS"
    VEHICLE_OCCUPIED = "VEHICLE_OCCUPIED"
    RESERVATION_NOT_FOUND = "RESERVATION_NOT_FOUND"
    DATA_MISMATCH = "DATA_MISMATCH"
    AMBIGUOUS_INVOICE = "AMBIGUOUS_INVOICE"
    STORAGE_ERROR = "STORAGE_ERROR"


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_INPUT: "Fecha requerida no informada",
    ErrorCode.CLIENT_NOT_FOUND: "Cliente inexistente",
    ErrorCode.VEHICLE_NOT_FOUND: "Vehiculo inexistente",
    ErrorCode.NO_RENTAL_DAYS: "El numero de dias sera mayor que cero",
    ErrorCode.VEHICLE_OCCUPIED: "El vehiculo no esta disponible",
    ErrorCode.RESERVATION_NOT_FOUND: "Reserva inexistente",
    ErrorCode.DATA_MISMATCH: "Los datos proporcionados no coinciden con los de la reserva",
    ErrorCode.AMBIGUOUS_INVOICE: "Varias facturas coinciden con la reserva a anular",
    ErrorCode.STORAGE_ERROR: "Error en la base de datos",
}


@dataclass
class TransactionResult:
    """
    Outcome of a reservation or cancellation transaction.

    Attributes:
        success: True if the transaction committed
        error_code: Failure kind (None on success)
        error_message: Human-readable message for error_code
        details: Extra diagnostic data (conflicting IDs, mismatched fields, SQLSTATE...)
        reservation_id: Reservation created or cancelled
        invoice_number: Invoice created or deleted (None if no invoice was deleted)
        total: Invoice total (creation only)
        days: Billed days (creation only)
        effective_end: End date used for availability (creation only)
    """

    success: bool
    error_code: ErrorCode | None = None
    error_message: str | None = None
    details: dict[str, Any] = field(default_factory=dict)
    reservation_id: int | None = None
    invoice_number: int | None = None
    total: Decimal | None = None
    days: int | None = None
    effective_end: date | None = None

    @classmethod
    def failure(cls, error_code: ErrorCode, **details: Any) -> "TransactionResult":
        """Build a failed result with the default message for error_code."""
        return cls(
            success=False,
            error_code=error_code,
            error_message=ERROR_MESSAGES[error_code],
            details=details,
        )
