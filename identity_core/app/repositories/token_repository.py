from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from identity_core.domain.entities import JwtToken


class ITokenRepository(ABC):
    """JWT revocation ledger interface - application layer"""

    @abstractmethod
    async def save(self, token: JwtToken) -> JwtToken:
        """Insert an issued token. Raises ConflictError on duplicate jti."""
        pass

    @abstractmethod
    async def find_by_jti(self, jti: UUID) -> Optional[JwtToken]:
        """Get token record by JWT ID"""
        pass

    @abstractmethod
    async def revoke(self, jti: UUID) -> bool:
        """
        Revoke a live token.

        Returns True if a non-revoked record was revoked, False (with a
        warning logged) if no such record exists.
        """
        pass

    @abstractmethod
    async def revoke_all_user_tokens(self, user_id: UUID) -> int:
        """Revoke every non-revoked token of a user. Returns count."""
        pass

    @abstractmethod
    async def delete_expired(self) -> int:
        """Delete all expired token records. Returns count."""
        pass
