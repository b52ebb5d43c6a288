import logging

from identity_core.app.services.auth_config import AuthConfig
from identity_core.app.services.unit_of_work import UnitOfWork
from identity_core.app.services.worker_pool import run_cpu_bound
from identity_core.domain.entities import User
from identity_core.domain.value_objects import Email, PasswordHash
from identity_core.shared.errors import AppError, ConflictError, ValidationError
from identity_core.shared.result import Result, Return
from .dtos import RegisterUserCommand, UserView

logger = logging.getLogger(__name__)


class RegisterUserUseCase:
    """
    Register User Use Case

    Command/Response Pattern:
    - Input: RegisterUserCommand
    - Output: Result[UserView]

    Business Logic:
    1. Validate input shape (password length, name present)
    2. Normalize and validate email
    3. Check email uniqueness (Conflict if taken)
    4. Create User (bcrypt hash on the credential worker pool)
    5. Persist; a uniqueness violation from the store is also a Conflict
    6. Return public view without the password hash
    """

    def __init__(self, uow: UnitOfWork, config: AuthConfig):
        self.uow = uow
        self.config = config

    def _validate_command(self, command: RegisterUserCommand) -> None:
        if len(command.password) < PasswordHash.MIN_LENGTH:
            raise ValidationError(
                f"Password must be at least {PasswordHash.MIN_LENGTH} characters"
            )
        if not command.name.strip():
            raise ValidationError("Name cannot be empty")

    async def execute(self, command: RegisterUserCommand) -> Result[UserView]:
        """
        Execute registration

        Args:
            command: RegisterUserCommand with email, password, name

        Returns:
            Result[UserView], or Error with code VALIDATION_ERROR / CONFLICT
        """
        async with self.uow:
            try:
                self._validate_command(command)
                email = Email(command.email)

                existing_user = await self.uow.users.find_by_email(email)
                if existing_user is not None:
                    raise ConflictError("Email already exists")

                user = await run_cpu_bound(
                    User.create,
                    email,
                    command.password,
                    command.name,
                    self.config.bcrypt_rounds,
                )
                user = await self.uow.users.save(user)

                await self.uow.commit()
            except AppError as exc:
                return Return.err(exc.error)

            logger.info(f"User registered: {user.id}")
            return Return.ok(UserView.from_user(user))
