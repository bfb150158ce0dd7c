"""
Seed script for the secuencias table.

Creates the reservation and invoice counters at zero if they are missing.
Existing counters are never reset.
Can be run standalone: python -m database.seeds.sequences
"""

import asyncio

from sqlalchemy import select

from database.connection import AsyncSessionLocal
from database.models import SequenceCounter
from database.sequences import ALL_SEQUENCES


async def seed_sequences(session_factory=None) -> None:
    """Create missing sequence counters."""
    session_factory = session_factory or AsyncSessionLocal

    async with session_factory() as session:
        async with session.begin():
            for name in ALL_SEQUENCES:
                result = await session.execute(
                    select(SequenceCounter).where(SequenceCounter.nombre == name)
                )
                if result.scalar_one_or_none() is None:
                    session.add(SequenceCounter(nombre=name, valor=0))
                    print(f"✓ Created sequence counter: {name}")
                else:
                    print(f"⊙ Sequence counter already exists: {name}")


if __name__ == "__main__":
    print("Seeding secuencias table...")
    print("=" * 60)
    asyncio.run(seed_sequences())
