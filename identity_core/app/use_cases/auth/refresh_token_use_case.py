"""
Refresh Token Use Case

Handles JWT refresh with refresh token rotation. The presented refresh token
is revoked and committed before the replacement pair is minted, so a token
can be exchanged at most once.
"""

import asyncio
import logging
from uuid import UUID

from identity_core.app.services.auth_config import AuthConfig
from identity_core.app.services.unit_of_work import UnitOfWork
from identity_core.domain.entities import Claims, TokenPair, TokenType
from identity_core.shared.errors import (
    AppError,
    AuthenticationError,
    ReauthenticationRequiredError,
)
from identity_core.shared.result import Result, Return
from .dtos import RefreshTokenCommand

logger = logging.getLogger(__name__)


def _claim_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError:
        raise AuthenticationError("Invalid token")


class RefreshTokenUseCase:
    """
    Use case for refreshing JWT access tokens.

    Business Rules:
    - Only refresh tokens are accepted
    - The ledger record must exist, be unrevoked and unexpired
    - Rotation: old token revoked (and committed) before new pair is minted
    - A concurrent refresh that loses the revoke race is rejected as revoked
    - Failure or cancellation after the revoke commit surfaces
      REAUTHENTICATION_REQUIRED; the client must log in again
    """

    def __init__(self, uow: UnitOfWork, config: AuthConfig):
        self.uow = uow
        self.config = config

    async def _consume(self, claims: Claims) -> UUID:
        if claims.token_type != TokenType.refresh:
            raise AuthenticationError("Invalid token type, expected refresh token")

        jti = _claim_uuid(claims.jti)
        user_id = _claim_uuid(claims.sub)

        stored = await self.uow.tokens.find_by_jti(jti)
        if stored is None:
            raise AuthenticationError("Token not found")
        if stored.is_revoked():
            logger.warning(f"Refresh with revoked token {jti} for user {user_id}")
            raise AuthenticationError("Token has been revoked")
        if stored.is_expired():
            raise AuthenticationError("Token has expired")

        revoked = await self.uow.tokens.revoke(jti)
        if not revoked:
            raise AuthenticationError("Token has been revoked")

        await self.uow.commit()
        return user_id

    async def execute(self, command: RefreshTokenCommand) -> Result[TokenPair]:
        """
        Execute refresh token use case.

        Args:
            command: RefreshTokenCommand carrying the encoded refresh token

        Returns:
            Result with a new TokenPair, or Error

        Raises:
            ReauthenticationRequiredError: the call was cancelled after the
                old refresh token was revoked
        """
        async with self.uow:
            try:
                claims = TokenPair.decode(command.refresh_token, self.config.jwt_secret)
                user_id = await self._consume(claims)
            except AppError as exc:
                return Return.err(exc.error)

            try:
                token_pair, access_token, refresh_token = TokenPair.generate(
                    user_id,
                    self.config.jwt_secret,
                    self.config.access_token_ttl_seconds,
                    self.config.refresh_token_ttl_seconds,
                )
                await self.uow.tokens.save(access_token)
                await self.uow.tokens.save(refresh_token)
                await self.uow.commit()
            except asyncio.CancelledError as exc:
                logger.error(
                    f"Refresh cancelled after revoking token {claims.jti} "
                    f"for user {user_id}"
                )
                raise ReauthenticationRequiredError(reason="cancelled") from exc
            except AppError as exc:
                logger.error(
                    f"Refresh failed after revoking token {claims.jti} "
                    f"for user {user_id}: {exc.message}"
                )
                return Return.err(ReauthenticationRequiredError(reason=exc.message).error)

            logger.info(f"Refresh token rotated for user {user_id}")
            return Return.ok(token_pair)
