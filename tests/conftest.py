"""
Test configuration and fixtures.

This module sets up test environment and provides shared fixtures for all tests.
"""

import os
from contextlib import asynccontextmanager
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

# Use SQLite for the module-level engine so importing database.connection
# never needs a PostgreSQL server.
# Must be set BEFORE any imports of database.connection or shared.config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["DB_ISOLATION_LEVEL"] = "SERIALIZABLE"

from rental.services.pricing_service import ModelPricing, VehiclePricing  # noqa: E402


@pytest.fixture
def client_id():
    """Fixed client NIF for testing."""
    return "12345678A"


@pytest.fixture
def vehicle_plate():
    """Fixed licence plate for testing."""
    return "1234-ABC"


@pytest.fixture
def vehicle_pricing():
    """Pricing for a 45.00/day petrol model with a 50 litre tank at 1.459/l."""
    return VehiclePricing(
        model=ModelPricing(
            id_modelo=1,
            precio_cada_dia=Decimal("45.00"),
            capacidad_deposito=50,
            tipo_combustible="Gasolina",
        ),
        precio_por_litro=Decimal("1.459"),
    )


@pytest.fixture
def mock_session():
    """AsyncSession stand-in; commit/rollback/execute are awaitable mocks."""
    session = MagicMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    return session


@pytest.fixture
def session_factory(mock_session):
    """Session provider yielding mock_session, shaped like get_async_session."""

    @asynccontextmanager
    async def factory():
        yield mock_session

    return factory


@pytest.fixture
def make_reservation():
    """Factory for Reservation row stand-ins with the mapped attribute names."""

    def factory(id_reserva, matricula="1234-ABC", fecha_ini=date(2024, 1, 10), fecha_fin=None, cliente="12345678A"):
        reservation = MagicMock()
        reservation.id_reserva = id_reserva
        reservation.cliente = cliente
        reservation.matricula = matricula
        reservation.fecha_ini = fecha_ini
        reservation.fecha_fin = fecha_fin
        return reservation

    return factory
