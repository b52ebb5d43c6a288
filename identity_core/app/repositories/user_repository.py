from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from identity_core.domain.entities import User
from identity_core.domain.value_objects import Email


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def save(self, user: User) -> User:
        """Insert a new user. Raises ConflictError if the email is taken."""
        pass

    @abstractmethod
    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def find_by_email(self, email: Email) -> Optional[User]:
        """Get user by normalized email address"""
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update existing user. Raises NotFoundError if absent."""
        pass

    @abstractmethod
    async def delete(self, user_id: UUID) -> None:
        """Delete user (administrative). Raises NotFoundError if absent."""
        pass
