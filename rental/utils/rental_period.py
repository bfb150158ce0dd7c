"""
Rental period helpers shared by reservation and cancellation.

A reservation either has a fixed end date or runs for the default duration.
The persisted form of the default duration is a NULL end date; everywhere
else it is the explicit DefaultDuration value below, and the effective end
date is always derived through effective_end().
"""

from dataclasses import dataclass
from datetime import date, timedelta

# Days billed and blocked when no end date is given
DEFAULT_RENTAL_DAYS = 4


@dataclass(frozen=True)
class FixedEnd:
    """Reservation ends on a caller-supplied date (exclusive)."""

    end: date


@dataclass(frozen=True)
class DefaultDuration:
    """Reservation has no end date and lasts DEFAULT_RENTAL_DAYS."""


RentalEnd = FixedEnd | DefaultDuration


def rental_end_from(end_date: date | None) -> RentalEnd:
    """Build a RentalEnd from an optional end date (as stored or as given)."""
    if end_date is None:
        return DefaultDuration()
    return FixedEnd(end_date)


def stored_end(rental_end: RentalEnd) -> date | None:
    """End date as persisted in the reservation row (NULL for default duration)."""
    if isinstance(rental_end, FixedEnd):
        return rental_end.end
    return None


def effective_end(start_date: date, rental_end: RentalEnd) -> date:
    """End date used for pricing and availability."""
    if isinstance(rental_end, FixedEnd):
        return rental_end.end
    return start_date + timedelta(days=DEFAULT_RENTAL_DAYS)


def rental_days(start_date: date, rental_end: RentalEnd) -> int:
    """
    Number of billed days.

    May be zero or negative for a fixed end on/before the start; callers
    reject those with NO_RENTAL_DAYS.
    """
    if isinstance(rental_end, FixedEnd):
        return (rental_end.end - start_date).days
    return DEFAULT_RENTAL_DAYS


def intervals_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """
    Half-open interval overlap: [start_a, end_a) and [start_b, end_b).

    Boundaries are strict, so a reservation ending on the day another one
    starts does not conflict with it.
    """
    return start_a < end_b and start_b < end_a
