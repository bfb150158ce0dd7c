"""
Rental services module.

Data access and pricing used by the transaction handlers.

Services:
- pricing_service: Vehicle model / fuel price lookup and invoice amounts
- invoice_service: Invoice insert, lookup for cancellation, delete
- reservation_service: Reservation insert/delete and existence checks
"""
