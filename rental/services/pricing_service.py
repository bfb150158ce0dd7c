"""
Pricing lookup for rental invoices.

Resolves a vehicle's model pricing and the fuel unit price, and computes the
two invoice amounts (rental days and full fuel tank). Reservation and
cancellation both price through compute_invoice_amounts(), so the total
recomputed at cancellation matches the one stored at creation.
"""

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import FuelPrice, Vehicle, VehicleModel

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class ModelPricing:
    """Pricing data of the model a vehicle belongs to."""

    id_modelo: int
    precio_cada_dia: Decimal
    capacidad_deposito: int
    tipo_combustible: str


@dataclass(frozen=True)
class VehiclePricing:
    """Model pricing plus the unit price of its fuel."""

    model: ModelPricing
    precio_por_litro: Decimal


@dataclass(frozen=True)
class InvoiceAmounts:
    """Invoice line amounts, each rounded to cents; total is their exact sum."""

    rental: Decimal
    fuel: Decimal

    @property
    def total(self) -> Decimal:
        return self.rental + self.fuel


async def get_model_pricing(
    session: AsyncSession,
    vehicle_plate: str,
    lock_vehicle: bool = False,
) -> ModelPricing | None:
    """
    Fetch the model pricing for a vehicle.

    Args:
        session: Session with an active transaction
        vehicle_plate: Licence plate
        lock_vehicle: Take a row lock on the vehicle (SELECT ... FOR UPDATE OF
            vehiculos) so that concurrent bookings of it serialize

    Returns:
        ModelPricing, or None if the vehicle or its model does not exist
    """
    stmt = (
        select(
            VehicleModel.id_modelo,
            VehicleModel.precio_cada_dia,
            VehicleModel.capacidad_deposito,
            VehicleModel.tipo_combustible,
        )
        .select_from(Vehicle)
        .join(VehicleModel, Vehicle.id_modelo == VehicleModel.id_modelo)
        .where(Vehicle.matricula == vehicle_plate)
    )
    if lock_vehicle:
        stmt = stmt.with_for_update(of=Vehicle)

    result = await session.execute(stmt)
    row = result.one_or_none()
    if row is None:
        return None

    if row.precio_cada_dia is None or row.capacidad_deposito is None or row.tipo_combustible is None:
        logger.warning(
            f"Model {row.id_modelo} has incomplete pricing data",
            extra={"vehicle_plate": vehicle_plate}
        )
        return None

    return ModelPricing(
        id_modelo=row.id_modelo,
        precio_cada_dia=Decimal(row.precio_cada_dia),
        capacidad_deposito=int(row.capacidad_deposito),
        tipo_combustible=row.tipo_combustible,
    )


async def get_fuel_price(session: AsyncSession, fuel_type: str) -> Decimal | None:
    """Fetch the price per litre for a fuel type (None if unknown)."""
    result = await session.execute(
        select(FuelPrice.precio_por_litro).where(FuelPrice.tipo_combustible == fuel_type)
    )
    price = result.scalar_one_or_none()
    return Decimal(price) if price is not None else None


async def get_vehicle_pricing(
    session: AsyncSession,
    vehicle_plate: str,
    lock_vehicle: bool = False,
) -> VehiclePricing | None:
    """
    Resolve everything needed to price a rental of `vehicle_plate`.

    Returns None when the vehicle, its model, or its fuel price is missing;
    the transactions report all three as VEHICLE_NOT_FOUND.
    """
    model = await get_model_pricing(session, vehicle_plate, lock_vehicle=lock_vehicle)
    if model is None:
        return None

    fuel_price = await get_fuel_price(session, model.tipo_combustible)
    if fuel_price is None:
        logger.warning(
            f"No fuel price for fuel type '{model.tipo_combustible}'",
            extra={"vehicle_plate": vehicle_plate}
        )
        return None

    return VehiclePricing(model=model, precio_por_litro=fuel_price)


def compute_invoice_amounts(pricing: VehiclePricing, days: int) -> InvoiceAmounts:
    """
    Compute rental and fuel amounts.

    rental = daily price x days
    fuel   = price per litre x tank capacity

    Example:
        >>> amounts = compute_invoice_amounts(pricing, 4)  # 45.50/day, 50 l at 1.459
        >>> amounts.rental, amounts.fuel, amounts.total
        (Decimal('182.00'), Decimal('72.95'), Decimal('254.95'))
    """
    rental = (pricing.model.precio_cada_dia * days).quantize(CENTS, rounding=ROUND_HALF_UP)
    fuel = (pricing.precio_por_litro * pricing.model.capacidad_deposito).quantize(
        CENTS, rounding=ROUND_HALF_UP
    )
    return InvoiceAmounts(rental=rental, fuel=fuel)
