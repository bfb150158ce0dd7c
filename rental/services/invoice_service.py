"""
Invoice persistence for reservations.

A reservation's invoice has exactly two lines: the rental days and a full
fuel tank. There is no foreign key from reservation to invoice, so
cancellation locates the invoice by client and amount through
find_invoice_for_cancellation().
"""

import logging
from decimal import Decimal
from typing import Any

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Invoice, InvoiceLine
from rental.services.pricing_service import InvoiceAmounts, VehiclePricing

logger = logging.getLogger(__name__)


def rental_line_description(days: int, id_modelo: int) -> str:
    return f"{days} dias de alquiler, vehiculo modelo {id_modelo}"


def fuel_line_description(capacidad_deposito: int, tipo_combustible: str) -> str:
    return f"Deposito lleno de {capacidad_deposito} litros de {tipo_combustible}"


def build_invoice_lines(
    pricing: VehiclePricing, days: int, amounts: InvoiceAmounts
) -> list[tuple[str, Decimal]]:
    """Return the (description, amount) pairs of an invoice, rental line first."""
    return [
        (rental_line_description(days, pricing.model.id_modelo), amounts.rental),
        (
            fuel_line_description(pricing.model.capacidad_deposito, pricing.model.tipo_combustible),
            amounts.fuel,
        ),
    ]


async def insert_invoice(
    session: AsyncSession, invoice_number: int, client_id: str, total: Decimal
) -> int:
    """Insert the invoice header. Returns the number of rows inserted."""
    result = await session.execute(
        insert(Invoice).values(nro_factura=invoice_number, cliente=client_id, importe=total)
    )
    return result.rowcount


async def insert_invoice_line(
    session: AsyncSession, invoice_number: int, description: str, amount: Decimal
) -> int:
    """Insert one invoice line. Returns the number of rows inserted."""
    result = await session.execute(
        insert(InvoiceLine).values(nro_factura=invoice_number, concepto=description, importe=amount)
    )
    return result.rowcount


async def find_invoice_for_cancellation(
    session: AsyncSession, client_id: str, expected_total: Decimal
) -> dict[str, Any]:
    """
    Find the invoice to delete when cancelling a reservation.

    Matches invoices of `client_id` whose amount equals `expected_total`.
    Two unrelated invoices may share a total, so more than one match is
    reported as ambiguous and no invoice is picked.

    Args:
        session: Session with an active transaction
        client_id: Client NIF
        expected_total: Total recomputed from the reservation

    Returns:
        dict:
            {
                "invoice_number": int | None,  # set only for a unique match
                "ambiguous": bool,
                "matching_invoices": list[int]
            }

    Example:
        >>> await find_invoice_for_cancellation(session, "12345678A", Decimal("254.95"))
        {"invoice_number": 7, "ambiguous": False, "matching_invoices": [7]}
    """
    stmt = (
        select(Invoice.nro_factura)
        .where(Invoice.cliente == client_id)
        .where(Invoice.importe == expected_total)
        .order_by(Invoice.nro_factura)
        .with_for_update()
    )
    result = await session.execute(stmt)
    matches = list(result.scalars().all())

    if len(matches) > 1:
        logger.warning(
            f"Ambiguous invoice match: {len(matches)} invoices with amount {expected_total}",
            extra={"client_id": client_id}
        )
        return {"invoice_number": None, "ambiguous": True, "matching_invoices": matches}

    return {
        "invoice_number": matches[0] if matches else None,
        "ambiguous": False,
        "matching_invoices": matches,
    }


async def delete_invoice(session: AsyncSession, invoice_number: int) -> int:
    """
    Delete an invoice and its lines.

    Returns:
        Number of invoice rows deleted (1 when the invoice existed)
    """
    await session.execute(delete(InvoiceLine).where(InvoiceLine.nro_factura == invoice_number))
    result = await session.execute(delete(Invoice).where(Invoice.nro_factura == invoice_number))
    return result.rowcount
