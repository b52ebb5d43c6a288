import logging

from pydantic import BaseModel

from identity_core.app.services.unit_of_work import UnitOfWork
from identity_core.shared.errors import AppError
from identity_core.shared.result import Result, Return

logger = logging.getLogger(__name__)


class CleanupReport(BaseModel):
    sessions_deleted: int = 0
    tokens_deleted: int = 0


class CleanupExpiredUseCase:
    """
    Delete expired sessions and expired JWT ledger records.

    Expired rows are already rejected on use, so this only reclaims storage.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, sessions: bool = True, tokens: bool = True
    ) -> Result[CleanupReport]:
        async with self.uow:
            try:
                sessions_deleted = (
                    await self.uow.sessions.delete_expired() if sessions else 0
                )
                tokens_deleted = await self.uow.tokens.delete_expired() if tokens else 0
                await self.uow.commit()
            except AppError as exc:
                return Return.err(exc.error)

            logger.info(
                f"Cleanup removed {sessions_deleted} sessions and "
                f"{tokens_deleted} tokens"
            )
            return Return.ok(
                CleanupReport(
                    sessions_deleted=sessions_deleted, tokens_deleted=tokens_deleted
                )
            )
