import logging
from typing import Optional
from uuid import UUID

from sqlmodel import col, delete, select
from sqlmodel.ext.asyncio.session import AsyncSession

from identity_core.adapter.repositories.base import database_errors
from identity_core.app.repositories.session_repository import ISessionRepository
from identity_core.domain.base import utc_now
from identity_core.domain.entities import Session
from identity_core.shared.errors import NotFoundError

logger = logging.getLogger(__name__)


class SessionRepository(ISessionRepository):
    """Session repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, session_obj: Session) -> Session:
        """Create a new session, replacing any other session of the user"""
        async with database_errors("Session already exists"):
            await self.session.execute(
                delete(Session).where(
                    Session.user_id == session_obj.user_id,
                    Session.id != session_obj.id,
                )
            )
            self.session.add(session_obj)
            await self.session.flush()
            await self.session.refresh(session_obj)
        return session_obj

    async def find_by_id(self, session_id: UUID) -> Optional[Session]:
        """Get session by ID"""
        async with database_errors():
            stmt = select(Session).where(Session.id == session_id)
            result = await self.session.exec(stmt)
            return result.one_or_none()

    async def find_by_user_id(self, user_id: UUID) -> Optional[Session]:
        """Get the most recent session for a user"""
        async with database_errors():
            stmt = (
                select(Session)
                .where(Session.user_id == user_id)
                .order_by(col(Session.created_at).desc())
                .limit(1)
            )
            result = await self.session.exec(stmt)
            return result.first()

    async def update(self, session_obj: Session) -> Session:
        """Update existing session"""
        async with database_errors("Session already exists"):
            existing = await self.session.get(Session, session_obj.id)
            if existing is None:
                raise NotFoundError("Session not found")

            session_obj = await self.session.merge(session_obj)
            await self.session.flush()
            await self.session.refresh(session_obj)
        return session_obj

    async def delete(self, session_id: UUID) -> None:
        async with database_errors():
            result = await self.session.execute(
                delete(Session).where(Session.id == session_id)
            )
            await self.session.flush()

        if result.rowcount == 0:
            logger.warning(f"Session {session_id} already gone")

    async def delete_by_user_id(self, user_id: UUID) -> int:
        """Delete all sessions for a user"""
        async with database_errors():
            result = await self.session.execute(
                delete(Session).where(Session.user_id == user_id)
            )
            await self.session.flush()
        return result.rowcount

    async def delete_expired(self) -> int:
        async with database_errors():
            result = await self.session.execute(
                delete(Session).where(Session.expires_at < utc_now())
            )
            await self.session.flush()
        return result.rowcount
