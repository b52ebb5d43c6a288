from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from identity_core.adapter.repositories.base import database_errors
from identity_core.app.repositories.user_repository import IUserRepository
from identity_core.domain.entities import User
from identity_core.domain.value_objects import Email
from identity_core.shared.errors import NotFoundError


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, user: User) -> User:
        """Create a new user"""
        async with database_errors("Email already exists"):
            self.session.add(user)
            await self.session.flush()
            await self.session.refresh(user)
        return user

    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        async with database_errors():
            stmt = select(User).where(User.id == user_id)
            result = await self.session.exec(stmt)
            return result.one_or_none()

    async def find_by_email(self, email: Email) -> Optional[User]:
        """Get user by email address"""
        async with database_errors():
            stmt = select(User).where(User.email == email.value)
            result = await self.session.exec(stmt)
            return result.one_or_none()

    async def update(self, user: User) -> User:
        """Update existing user"""
        async with database_errors("Email already exists"):
            existing = await self.session.get(User, user.id)
            if existing is None:
                raise NotFoundError("User not found")

            user = await self.session.merge(user)
            await self.session.flush()
            await self.session.refresh(user)
        return user

    async def delete(self, user_id: UUID) -> None:
        async with database_errors("User is still referenced"):
            existing = await self.session.get(User, user_id)
            if existing is None:
                raise NotFoundError("User not found")

            await self.session.delete(existing)
            await self.session.flush()
