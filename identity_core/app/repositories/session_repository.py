from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from identity_core.domain.entities import Session


class ISessionRepository(ABC):
    """Session repository interface - application layer"""

    @abstractmethod
    async def save(self, session: Session) -> Session:
        """
        Insert a new session.

        Enforces the single-session invariant: any other session of the
        same user is deleted first.
        """
        pass

    @abstractmethod
    async def find_by_id(self, session_id: UUID) -> Optional[Session]:
        """Get session by ID"""
        pass

    @abstractmethod
    async def find_by_user_id(self, user_id: UUID) -> Optional[Session]:
        """Get the most recent session for a user"""
        pass

    @abstractmethod
    async def update(self, session: Session) -> Session:
        """Persist a slid expiry"""
        pass

    @abstractmethod
    async def delete(self, session_id: UUID) -> None:
        """Delete a session. Absent sessions are not an error."""
        pass

    @abstractmethod
    async def delete_by_user_id(self, user_id: UUID) -> int:
        """Delete all sessions for a user. Returns count of deleted sessions."""
        pass

    @abstractmethod
    async def delete_expired(self) -> int:
        """Delete all expired sessions. Returns count."""
        pass
