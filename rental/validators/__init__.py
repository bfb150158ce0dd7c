"""
Transaction validators.

Validators for business rules that must hold before the reservation and
cancellation transactions write anything.

Validators:
- validate_rental_days: Rental spans at least one whole day
- validate_vehicle_availability: No overlapping reservation for the vehicle
- validate_reservation_details: Caller data matches the stored reservation
"""

from rental.validators.transaction_validators import (
    validate_rental_days,
    validate_reservation_details,
    validate_vehicle_availability,
)

__all__ = [
    "validate_rental_days",
    "validate_reservation_details",
    "validate_vehicle_availability",
]
