from uuid import UUID

from identity_core.app.services.unit_of_work import UnitOfWork
from identity_core.app.use_cases.auth.dtos import UserView
from identity_core.shared.errors import AppError, NotFoundError
from identity_core.shared.result import Result, Return
from .dtos import UpdateProfileCommand


class UpdateProfileUseCase:
    """
    Use case for editing the user's profile (name, bio, avatar).

    Business Rules:
    - Only fields present in the command are changed
    - Name is trimmed, must be non-empty and at most 255 characters
    - Bio at most 500 characters; null clears it
    - Avatar URL must be http or https; null clears it
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, user_id: UUID, command: UpdateProfileCommand
    ) -> Result[UserView]:
        provided = command.model_fields_set

        async with self.uow:
            try:
                user = await self.uow.users.find_by_id(user_id)
                if user is None:
                    raise NotFoundError("User not found")

                if "name" in provided:
                    user.update_name(command.name)
                if "bio" in provided:
                    user.update_bio(command.bio)
                if "avatar_url" in provided:
                    user.update_avatar(command.avatar_url)
                user = await self.uow.users.update(user)

                await self.uow.commit()
            except AppError as exc:
                return Return.err(exc.error)

            return Return.ok(UserView.from_user(user))
