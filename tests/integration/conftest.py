"""
Fixtures for integration tests against an in-memory SQLite database.

Each test gets a fresh schema, seeded sequence counters and reference data,
two clients and two vehicles:
- 1234-ABC: model 1 (45.00/day, 50 l Gasolina at 1.459)
- 5678-DEF: model 3 (60.00/day, 55 l Gasolina at 1.459)
"""

import pytest
from sqlalchemy import event, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from database.models import Base, Client, Vehicle
from database.seeds import seed_all
from rental.engine import BookingEngine


def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
async def db_engine():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session_factory(db_engine):
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    await seed_all(factory)

    async with factory() as session:
        async with session.begin():
            session.add_all([
                Client(nif="12345678A", nombre="Ana", ape1="Garcia"),
                Client(nif="87654321B", nombre="Luis", ape1="Martin"),
                Vehicle(matricula="1234-ABC", id_modelo=1, color="Blanco"),
                Vehicle(matricula="5678-DEF", id_modelo=3, color="Rojo"),
            ])

    return factory


@pytest.fixture
def booking_engine(db_session_factory):
    return BookingEngine(db_session_factory)


@pytest.fixture
def count_rows(db_session_factory):
    """Count rows of a mapped class, optionally filtered."""

    async def count(model, *criteria):
        async with db_session_factory() as session:
            stmt = select(func.count()).select_from(model)
            if criteria:
                stmt = stmt.where(*criteria)
            return await session.scalar(stmt)

    return count
