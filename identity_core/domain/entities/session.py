"""
Session Entity

Server-side web session bound to a CSRF token.
"""

from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from identity_core.domain.base import utc_now
from identity_core.domain.value_objects import CsrfToken


class Session(SQLModel, table=True):
    """
    Session entity - cookie-backed authentication for the web client.

    Business Rules:
    - At most one session per user (prior sessions deleted on login)
    - Fresh 256-bit CSRF token generated on creation
    - Expires after the configured TTL, optionally slid on activity
    """

    __tablename__ = "sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    csrf_token: str = Field(max_length=255)
    ip_address: Optional[str] = Field(default=None, max_length=45)
    user_agent: Optional[str] = None

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_sessions_expires_at", "expires_at"),)

    @classmethod
    def create(
        cls,
        user_id: UUID,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        ttl_seconds: int = 86400,
    ) -> "Session":
        now = utc_now()
        return cls(
            user_id=user_id,
            csrf_token=CsrfToken.generate().value,
            ip_address=ip_address,
            user_agent=user_agent,
            expires_at=now + timedelta(seconds=ttl_seconds),
            created_at=now,
            updated_at=now,
        )

    def is_expired(self) -> bool:
        return utc_now() > self.expires_at

    def is_valid(self) -> bool:
        return not self.is_expired()

    def refresh(self, ttl_seconds: int) -> None:
        """Slide expiry to now + ttl"""
        now = utc_now()
        self.expires_at = now + timedelta(seconds=ttl_seconds)
        self.updated_at = now

    def verify_csrf(self, token: str) -> bool:
        return CsrfToken.from_string(self.csrf_token).verify(token)


class SessionCookie(BaseModel):
    """Values the web transport stores client side"""

    session_id: UUID
    csrf_token: str

    @classmethod
    def from_session(cls, session: Session) -> "SessionCookie":
        return cls(session_id=session.id, csrf_token=session.csrf_token)
