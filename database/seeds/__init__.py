"""
Seed data orchestration module.

Provides seed_all() function to execute all seed scripts in dependency order.
Can be run standalone: python -m database.seeds
"""

from database.seeds.reference_data import seed_reference_data
from database.seeds.sequences import seed_sequences


async def seed_all(session_factory=None) -> None:
    """
    Execute all seed scripts in dependency order.

    Order:
    1. secuencias - independent
    2. precio_combustible, modelos - models depend on fuel prices
    """
    print("Starting database seeding...")
    print("-" * 50)

    await seed_sequences(session_factory)
    await seed_reference_data(session_factory)

    print("-" * 50)
    print(" Database seeding complete!")

