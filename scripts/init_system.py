"""
System initialization orchestrator for the rental booking engine.

This script orchestrates the complete initialization of the system:
- Table creation from the ORM metadata
- Seed data loading (sequence counters, fuel prices, vehicle models)
- Verification of all components via the startup validator

Designed to be idempotent and safe to run multiple times.
"""

import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from database.connection import engine  # noqa: E402
from database.models import Base  # noqa: E402
from database.seeds import seed_all  # noqa: E402
from shared.logging_config import configure_logging  # noqa: E402
from shared.startup_validator import StartupValidationError, validate_startup_config  # noqa: E402

logger = logging.getLogger(__name__)


async def create_tables() -> None:
    """Create every table that does not exist yet."""
    logger.info("Creating tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("✓ Tables ready")


async def main():
    """Main entry point for system initialization."""
    configure_logging()

    logger.info("=" * 60)
    logger.info("RENTAL BOOKING ENGINE - SYSTEM INITIALIZATION")
    logger.info("=" * 60)

    try:
        await create_tables()
        await seed_all()
        results = await validate_startup_config()
    except StartupValidationError as e:
        logger.critical(f"Startup blocked: {e}")
        sys.exit(1)
    finally:
        await engine.dispose()

    logger.info("=" * 60)
    logger.info(f"✓ SYSTEM INITIALIZATION PASSED ({sum(results.values())}/{len(results)} checks)")
    logger.info("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
