"""
Request authentication use cases

Resolve a bearer access token or a session cookie into an identity.
"""

from typing import Optional
from uuid import UUID

from identity_core.app.services.auth_config import AuthConfig
from identity_core.app.services.unit_of_work import UnitOfWork
from identity_core.domain.entities import TokenPair, TokenType
from identity_core.shared.errors import AppError, AuthenticationError
from identity_core.shared.result import Result, Return
from .dtos import AuthenticatedSession, AuthenticatedUser


class AuthenticateAccessTokenUseCase:
    """
    Business Rules:
    - Token must verify and be an access token
    - Its jti must be in the ledger, unrevoked and unexpired
    """

    def __init__(self, uow: UnitOfWork, config: AuthConfig):
        self.uow = uow
        self.config = config

    async def execute(self, token: str) -> Result[AuthenticatedUser]:
        async with self.uow:
            try:
                claims = TokenPair.decode(token, self.config.jwt_secret)
                if claims.token_type != TokenType.access:
                    raise AuthenticationError("Invalid token type, expected access token")

                try:
                    jti = UUID(claims.jti)
                    user_id = UUID(claims.sub)
                except ValueError:
                    raise AuthenticationError("Invalid token")

                stored = await self.uow.tokens.find_by_jti(jti)
                if stored is None:
                    raise AuthenticationError("Token not found")
                if stored.is_revoked():
                    raise AuthenticationError("Token has been revoked")
                if stored.is_expired():
                    raise AuthenticationError("Token has expired")
            except AppError as exc:
                return Return.err(exc.error)

            return Return.ok(AuthenticatedUser(user_id=user_id, jti=jti))


class AuthenticateSessionUseCase:
    """
    Business Rules:
    - Session must exist and not be expired
    - State-changing requests must present the session's CSRF token
    - Optionally slides the expiry forward by the configured TTL
    """

    def __init__(self, uow: UnitOfWork, config: AuthConfig):
        self.uow = uow
        self.config = config

    async def execute(
        self,
        session_id: UUID,
        csrf_token: Optional[str] = None,
        require_csrf: bool = False,
        slide: bool = False,
    ) -> Result[AuthenticatedSession]:
        async with self.uow:
            try:
                session = await self.uow.sessions.find_by_id(session_id)
                if session is None:
                    raise AuthenticationError("Session not found")
                if session.is_expired():
                    raise AuthenticationError("Session has expired")
                if require_csrf and (
                    csrf_token is None or not session.verify_csrf(csrf_token)
                ):
                    raise AuthenticationError("Invalid CSRF token")

                if slide:
                    session.refresh(self.config.session_ttl_seconds)
                    session = await self.uow.sessions.update(session)
                    await self.uow.commit()
            except AppError as exc:
                return Return.err(exc.error)

            return Return.ok(AuthenticatedSession.from_session(session))
