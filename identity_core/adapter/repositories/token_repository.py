import logging
from typing import Optional
from uuid import UUID

from sqlmodel import delete, select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from identity_core.adapter.repositories.base import database_errors
from identity_core.app.repositories.token_repository import ITokenRepository
from identity_core.domain.base import utc_now
from identity_core.domain.entities import JwtToken

logger = logging.getLogger(__name__)


class TokenRepository(ITokenRepository):
    """JWT revocation ledger implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, token: JwtToken) -> JwtToken:
        async with database_errors("Token already exists"):
            self.session.add(token)
            await self.session.flush()
            await self.session.refresh(token)
        return token

    async def find_by_jti(self, jti: UUID) -> Optional[JwtToken]:
        """Get token record by JWT ID"""
        async with database_errors():
            stmt = select(JwtToken).where(JwtToken.jti == jti)
            result = await self.session.exec(stmt)
            return result.one_or_none()

    async def revoke(self, jti: UUID) -> bool:
        """Revoke a live token; the guard on revoked makes a second revoke a no-op"""
        stmt = (
            update(JwtToken)
            .where(JwtToken.jti == jti, JwtToken.revoked == False)
            .values(revoked=True, revoked_at=utc_now())
        )
        async with database_errors():
            result = await self.session.execute(stmt)
            await self.session.flush()

        if result.rowcount == 0:
            logger.warning(f"No live token with jti {jti} to revoke")
            return False
        return True

    async def revoke_all_user_tokens(self, user_id: UUID) -> int:
        """Revoke all live tokens for a user"""
        stmt = (
            update(JwtToken)
            .where(JwtToken.user_id == user_id, JwtToken.revoked == False)
            .values(revoked=True, revoked_at=utc_now())
        )
        async with database_errors():
            result = await self.session.execute(stmt)
            await self.session.flush()
        return result.rowcount

    async def delete_expired(self) -> int:
        async with database_errors():
            result = await self.session.execute(
                delete(JwtToken).where(JwtToken.expires_at < utc_now())
            )
            await self.session.flush()
        return result.rowcount
