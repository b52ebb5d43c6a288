import logging
from uuid import UUID

from identity_core.app.services.unit_of_work import UnitOfWork
from identity_core.shared.errors import AppError
from identity_core.shared.result import Result, Return
from .dtos import LogoutAllResult

logger = logging.getLogger(__name__)


class LogoutUserUseCase:
    """
    Use case for logging out.

    Business Rules:
    - Web logout deletes the session; an unknown session is not an error
    - API logout revokes every live token of the user
    - Logout-all does both
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def logout_web(self, session_id: UUID) -> Result[None]:
        async with self.uow:
            try:
                await self.uow.sessions.delete(session_id)
                await self.uow.commit()
            except AppError as exc:
                return Return.err(exc.error)

            logger.info(f"Session {session_id} logged out")
            return Return.ok(None)

    async def logout_api(self, user_id: UUID) -> Result[int]:
        """Revoke all of the user's tokens. Returns the number revoked."""
        async with self.uow:
            try:
                revoked = await self.uow.tokens.revoke_all_user_tokens(user_id)
                await self.uow.commit()
            except AppError as exc:
                return Return.err(exc.error)

            logger.info(f"Revoked {revoked} tokens for user {user_id}")
            return Return.ok(revoked)

    async def logout_all(self, user_id: UUID) -> Result[LogoutAllResult]:
        async with self.uow:
            try:
                sessions_deleted = await self.uow.sessions.delete_by_user_id(user_id)
                tokens_revoked = await self.uow.tokens.revoke_all_user_tokens(user_id)
                await self.uow.commit()
            except AppError as exc:
                return Return.err(exc.error)

            logger.info(
                f"Logged out user {user_id} everywhere: "
                f"{sessions_deleted} sessions, {tokens_revoked} tokens"
            )
            return Return.ok(
                LogoutAllResult(
                    sessions_deleted=sessions_deleted, tokens_revoked=tokens_revoked
                )
            )
