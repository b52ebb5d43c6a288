from uuid import UUID

from identity_core.app.services.unit_of_work import UnitOfWork
from identity_core.app.use_cases.auth.dtos import UserView
from identity_core.shared.errors import NotFoundError
from identity_core.shared.result import Result, Return


class GetProfileUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[UserView]:
        async with self.uow:
            user = await self.uow.users.find_by_id(user_id)
            if user is None:
                return Return.err(NotFoundError("User not found").error)

            return Return.ok(UserView.from_user(user))
