"""
Atomic transaction handlers for the rental booking engine.

Transaction handlers encapsulate multi-step operations that must execute
atomically (all succeed or all rollback) against the relational store.

Key design principles:
1. SERIALIZABLE isolation level for DB transactions (see DB_ISOLATION_LEVEL)
2. SELECT FOR UPDATE row locks on the vehicle and its reservations
3. Complete rollback on any step failure
4. Logging with trace_id for debugging
5. Descriptive error codes in TransactionResult

Transaction handlers:
- ReservationTransaction: Create a reservation and its invoice
- CancellationTransaction: Cancel a reservation and delete its invoice
"""

from rental.transactions.cancellation_transaction import CancellationTransaction
from rental.transactions.reservation_transaction import ReservationTransaction

__all__ = ["CancellationTransaction", "ReservationTransaction"]
