"""
Periodic storage cleanup

Background loop that deletes expired sessions and JWT ledger records. The
core never starts it; the application lifespan does when enabled.
"""

import asyncio
import logging
from typing import AsyncContextManager, Callable, Optional

from identity_core.app.services.unit_of_work import UnitOfWork
from identity_core.app.use_cases.maintenance import CleanupExpiredUseCase, CleanupReport

logger = logging.getLogger(__name__)

UnitOfWorkFactory = Callable[[], AsyncContextManager[UnitOfWork]]


async def run_cleanup_once(
    uow_factory: UnitOfWorkFactory, sessions: bool = True, tokens: bool = True
) -> Optional[CleanupReport]:
    async with uow_factory() as uow:
        use_case = CleanupExpiredUseCase(uow)
        result = await use_case.execute(sessions=sessions, tokens=tokens)

    if result.is_err():
        logger.error(f"Cleanup failed: {result.error.code} {result.error.message}")
        return None
    return result.value


async def run_periodic_cleanup(
    uow_factory: UnitOfWorkFactory,
    interval_seconds: float,
    sessions: bool = True,
    tokens: bool = True,
    max_iterations: Optional[int] = None,
) -> None:
    """
    Run cleanup now and then every interval_seconds.

    A failed iteration is logged and the loop carries on. Cancel the task to
    stop it; max_iterations bounds the loop for tests.
    """
    iteration = 0
    while max_iterations is None or iteration < max_iterations:
        iteration += 1
        try:
            await run_cleanup_once(uow_factory, sessions=sessions, tokens=tokens)
        except asyncio.CancelledError:
            logger.info("Cleanup task cancelled")
            raise
        except Exception as e:
            logger.warning(f"Cleanup task error: {e}")

        if max_iterations is None or iteration < max_iterations:
            await asyncio.sleep(interval_seconds)
