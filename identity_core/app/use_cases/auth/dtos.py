"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for the auth domain.
Provides type safety and clear contracts between layers.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from identity_core.domain.entities import Session, TokenPair, User


# ============================================================================
# Commands
# ============================================================================


class RegisterUserCommand(BaseModel):
    """Registration intent, built by the transport after request parsing"""

    email: str
    password: str
    name: str


class LoginWebCommand(BaseModel):
    """Cookie-session login"""

    email: str
    password: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class LoginApiCommand(BaseModel):
    """JWT login"""

    email: str
    password: str


class RefreshTokenCommand(BaseModel):
    refresh_token: str


# ============================================================================
# Response DTOs
# ============================================================================


class UserView(BaseModel):
    """Public view of a user (never includes the password hash)"""

    id: UUID
    email: str
    name: str
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    email_verified: bool
    is_active: bool
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserView":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            bio=user.bio,
            avatar_url=user.avatar_url,
            email_verified=user.email_verified,
            is_active=user.is_active,
            created_at=user.created_at,
        )


class WebLoginResult(BaseModel):
    """Result of cookie-session login"""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    user: UserView
    session: Session


class ApiLoginResult(BaseModel):
    """Result of JWT login"""

    user: UserView
    token_pair: TokenPair


class LogoutAllResult(BaseModel):
    sessions_deleted: int
    tokens_revoked: int


class AuthenticatedUser(BaseModel):
    """Identity resolved from a valid, non-revoked access token"""

    user_id: UUID
    jti: UUID


class AuthenticatedSession(BaseModel):
    """Identity resolved from a valid web session"""

    session_id: UUID
    user_id: UUID
    expires_at: datetime

    @classmethod
    def from_session(cls, session: Session) -> "AuthenticatedSession":
        return cls(
            session_id=session.id,
            user_id=session.user_id,
            expires_at=session.expires_at,
        )
