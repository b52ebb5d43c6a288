"""
JwtToken Entity

Revocation ledger record for every issued JWT.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from identity_core.domain.base import utc_now
from .enums import TokenType


class JwtToken(SQLModel, table=True):
    """
    JwtToken entity - persisted record of an issued access or refresh token.

    Business Rules:
    - jti is globally unique and immutable
    - Issued -> Revoked is the only transition; revoked never reverts
    - Expiry is computed at check time, never stored as a state
    - Created in pairs (access + refresh) at login and refresh
    """

    __tablename__ = "jwt_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    token_type: TokenType
    jti: UUID = Field(unique=True, index=True)

    revoked: bool = Field(default=False)
    revoked_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_jwt_tokens_expires_at", "expires_at"),
        Index("idx_jwt_tokens_revoked", "revoked"),
    )

    def is_expired(self) -> bool:
        return utc_now() > self.expires_at

    def is_revoked(self) -> bool:
        return self.revoked

    def is_valid(self) -> bool:
        return not self.is_expired() and not self.is_revoked()

    def revoke(self) -> None:
        if self.revoked:
            return
        self.revoked = True
        self.revoked_at = utc_now()
