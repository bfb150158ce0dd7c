"""
Seed script for rental reference data.

Populates fuel prices and vehicle models. Rows that already exist are left
untouched, so prices edited in the database survive re-seeding.
Can be run standalone: python -m database.seeds.reference_data
"""

import asyncio
from decimal import Decimal
from typing import Any

from database.connection import AsyncSessionLocal
from database.models import FuelPrice, VehicleModel

FUEL_PRICES_DATA: list[dict[str, Any]] = [
    {"tipo_combustible": "Gasolina", "precio_por_litro": Decimal("1.459")},
    {"tipo_combustible": "Gasoil", "precio_por_litro": Decimal("1.359")},
]

MODELS_DATA: list[dict[str, Any]] = [
    {
        "id_modelo": 1,
        "nombre": "Renault Clio",
        "precio_cada_dia": Decimal("45.00"),
        "capacidad_deposito": 50,
        "tipo_combustible": "Gasolina",
    },
    {
        "id_modelo": 2,
        "nombre": "Renault Megane",
        "precio_cada_dia": Decimal("55.00"),
        "capacidad_deposito": 60,
        "tipo_combustible": "Gasoil",
    },
    {
        "id_modelo": 3,
        "nombre": "Seat Leon",
        "precio_cada_dia": Decimal("60.00"),
        "capacidad_deposito": 55,
        "tipo_combustible": "Gasolina",
    },
]


async def seed_reference_data(session_factory=None) -> None:
    """
    Seed precio_combustible and modelos.

    Fuel prices go first because modelos references them.
    """
    session_factory = session_factory or AsyncSessionLocal

    async with session_factory() as session:
        async with session.begin():
            for fuel_data in FUEL_PRICES_DATA:
                if await session.get(FuelPrice, fuel_data["tipo_combustible"]) is None:
                    session.add(FuelPrice(**fuel_data))
                    print(f"✓ Created fuel price: {fuel_data['tipo_combustible']}")
                else:
                    print(f"⊙ Fuel price already exists: {fuel_data['tipo_combustible']}")

            # Flush so the models' foreign keys resolve
            await session.flush()

            for model_data in MODELS_DATA:
                if await session.get(VehicleModel, model_data["id_modelo"]) is None:
                    session.add(VehicleModel(**model_data))
                    print(f"✓ Created model: {model_data['nombre']}")
                else:
                    print(f"⊙ Model already exists: {model_data['nombre']}")


if __name__ == "__main__":
    print("Seeding reference data...")
    print("=" * 60)
    asyncio.run(seed_reference_data())
