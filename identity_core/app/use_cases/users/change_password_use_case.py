import logging
from uuid import UUID

from identity_core.app.services.auth_config import AuthConfig
from identity_core.app.services.unit_of_work import UnitOfWork
from identity_core.app.services.worker_pool import run_cpu_bound
from identity_core.shared.errors import (
    AppError,
    AuthenticationError,
    NotFoundError,
    ValidationError,
)
from identity_core.shared.result import Result, Return
from .dtos import ChangePasswordCommand

logger = logging.getLogger(__name__)


class ChangePasswordUseCase:
    """
    Use case for changing the authenticated user's password.

    Business Rules:
    - Confirmation, when given, must equal the new password
    - Current password must verify
    - New password follows the same rules as at registration
    """

    def __init__(self, uow: UnitOfWork, config: AuthConfig):
        self.uow = uow
        self.config = config

    async def execute(self, user_id: UUID, command: ChangePasswordCommand) -> Result[None]:
        async with self.uow:
            try:
                if (
                    command.new_password_confirmation is not None
                    and command.new_password_confirmation != command.new_password
                ):
                    raise ValidationError("Passwords do not match")

                user = await self.uow.users.find_by_id(user_id)
                if user is None:
                    raise NotFoundError("User not found")

                current_valid = await run_cpu_bound(
                    user.verify_password, command.current_password
                )
                if not current_valid:
                    raise AuthenticationError("Invalid current password")

                await run_cpu_bound(
                    user.change_password,
                    command.new_password,
                    self.config.bcrypt_rounds,
                )
                await self.uow.users.update(user)

                await self.uow.commit()
            except AppError as exc:
                return Return.err(exc.error)

            logger.info(f"Password changed for user {user_id}")
            return Return.ok(None)
