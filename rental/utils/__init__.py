"""
Utility functions shared by the transaction handlers.

- rental_period: FixedEnd / DefaultDuration end dates and interval overlap
"""

from rental.utils.rental_period import (
    DEFAULT_RENTAL_DAYS,
    DefaultDuration,
    FixedEnd,
    RentalEnd,
    effective_end,
    intervals_overlap,
    rental_days,
    rental_end_from,
    stored_end,
)

__all__ = [
    "DEFAULT_RENTAL_DAYS",
    "DefaultDuration",
    "FixedEnd",
    "RentalEnd",
    "effective_end",
    "intervals_overlap",
    "rental_days",
    "rental_end_from",
    "stored_end",
]
