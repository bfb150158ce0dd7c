"""
Startup configuration validation module.

This module provides startup-time validation for critical configuration
to catch misconfigurations early (fail-fast) rather than at runtime when
a client tries to book a vehicle.

Usage:
    from shared.startup_validator import validate_startup_config, StartupValidationError

    async def main():
        try:
            await validate_startup_config()
        except StartupValidationError as e:
            logger.critical(f"Startup blocked: {e}")
            sys.exit(1)
"""

import logging

from sqlalchemy import func, select, text

from shared.config import SAFE_ISOLATION_LEVELS, get_settings

logger = logging.getLogger(__name__)


class StartupValidationError(Exception):
    """Raised when critical startup validation fails."""

    pass


async def validate_startup_config(session_factory=None, check_database: bool = True) -> dict[str, bool]:
    """
    Validate all critical configuration at startup.

    Performs tiered validation:
    - TIER 1 (CRITICAL): Block startup if any fail
    - TIER 2 (IMPORTANT): Warn but allow startup

    Args:
        session_factory: Session provider to check (defaults to get_async_session)
        check_database: If False, skip checks that need a database connection

    Returns:
        dict of {check_name: passed} for all validations

    Raises:
        StartupValidationError: If any CRITICAL check fails
    """
    from database.models import FuelPrice, SequenceCounter, VehicleModel
    from database.sequences import ALL_SEQUENCES

    settings = get_settings()
    results: dict[str, bool] = {}
    critical_failures: list[str] = []

    # =========================================================================
    # TIER 1: CRITICAL (block startup if any fail)
    # =========================================================================

    if check_database:
        if session_factory is None:
            from database.connection import get_async_session
            session_factory = get_async_session

        try:
            async with session_factory() as session:
                # 1. Database reachable
                await session.execute(text("SELECT 1"))
                results["database_connection"] = True
                logger.info("  [OK] Database connection successful")

                # 2. Sequence counters initialized
                result = await session.execute(
                    select(SequenceCounter.nombre).where(SequenceCounter.nombre.in_(ALL_SEQUENCES))
                )
                found = set(result.scalars().all())
                missing = [name for name in ALL_SEQUENCES if name not in found]
                if missing:
                    critical_failures.append(
                        f"Sequence counters missing: {', '.join(missing)} - run database seeds"
                    )
                    results["sequence_counters"] = False
                else:
                    results["sequence_counters"] = True
                    logger.info("  [OK] Sequence counters initialized")

                # 3. Reference data present (IMPORTANT: warn only)
                models = await session.scalar(select(func.count()).select_from(VehicleModel))
                fuels = await session.scalar(select(func.count()).select_from(FuelPrice))
                if not models or not fuels:
                    logger.warning(
                        f"Reference data incomplete: {models or 0} models, {fuels or 0} fuel prices"
                    )
                    results["reference_data"] = False
                else:
                    results["reference_data"] = True

        except Exception as e:
            critical_failures.append(f"Database connection failed: {e}")
            results["database_connection"] = False

    # =========================================================================
    # TIER 2: IMPORTANT (warn but allow startup)
    # =========================================================================

    # 4. Isolation level strong enough to prevent double bookings
    isolation = settings.DB_ISOLATION_LEVEL.upper()
    if isolation not in SAFE_ISOLATION_LEVELS:
        logger.warning(
            f"DB_ISOLATION_LEVEL={isolation}: concurrent reservations of the same vehicle "
            f"rely only on the vehicle row lock; use SERIALIZABLE to rule out double bookings"
        )
        results["isolation_level"] = False
    else:
        results["isolation_level"] = True
        logger.info(f"  [OK] Isolation level {isolation}")

    # 5. Database URL format validation
    if not settings.DATABASE_URL.startswith("postgresql+asyncpg://"):
        logger.warning(
            "DATABASE_URL should use asyncpg driver: postgresql+asyncpg://..."
        )
        results["database_url_format"] = False
    else:
        results["database_url_format"] = True

    # =========================================================================
    # Summary and result
    # =========================================================================

    passed = sum(1 for v in results.values() if v)
    total = len(results)
    logger.info(f"Startup validation: {passed}/{total} checks passed")

    if critical_failures:
        logger.critical("=" * 60)
        logger.critical("STARTUP BLOCKED - Critical configuration errors:")
        for i, failure in enumerate(critical_failures, 1):
            logger.critical(f"  {i}. {failure}")
        logger.critical("=" * 60)
        raise StartupValidationError(
            f"Critical startup validation failed ({len(critical_failures)} errors): "
            f"{'; '.join(critical_failures)}"
        )

    return results
