"""
Token Pair Engine

Issues and validates the HS256 access/refresh JWT pair handed to API clients.
Decoding only checks signature, structure and expiry; revocation is looked up
by the caller with the decoded jti.
"""

import logging
from datetime import UTC, datetime
from typing import Literal, Tuple
from uuid import UUID, uuid4

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError, JWTError
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from identity_core.domain.base import from_timestamp
from identity_core.shared.errors import AuthenticationError, InternalError
from .enums import TokenType
from .jwt_token import JwtToken

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class Claims(BaseModel):
    """Decoded JWT payload"""

    sub: str
    jti: str
    exp: int
    iat: int
    token_type: TokenType


def _mint(
    user_id: UUID, secret: str, token_type: TokenType, iat: int, ttl: int
) -> Tuple[str, JwtToken]:
    jti = uuid4()
    exp = iat + ttl
    payload = {
        "sub": str(user_id),
        "jti": str(jti),
        "exp": exp,
        "iat": iat,
        "token_type": token_type.value,
    }

    try:
        encoded = jwt.encode(payload, secret, algorithm=ALGORITHM)
    except JWTError as exc:
        raise InternalError(
            f"Failed to encode {token_type.value} token", reason=str(exc)
        )

    record = JwtToken(
        user_id=user_id,
        token_type=token_type,
        jti=jti,
        expires_at=from_timestamp(exp),
        revoked=False,
        revoked_at=None,
        created_at=from_timestamp(iat),
    )
    return encoded, record


class TokenPair(BaseModel):
    """Token bundle returned to API clients. Never rebuilt from storage."""

    access_token: str
    refresh_token: str
    token_type: Literal["Bearer"] = "Bearer"
    expires_in: int

    @classmethod
    def generate(
        cls,
        user_id: UUID,
        secret: str,
        access_ttl: int,
        refresh_ttl: int,
    ) -> Tuple["TokenPair", JwtToken, JwtToken]:
        """
        Mint a fresh access + refresh pair for a user.

        Args:
            user_id: Subject of both tokens
            secret: HMAC signing secret
            access_ttl: Access token lifetime in seconds
            refresh_ttl: Refresh token lifetime in seconds

        Returns:
            (TokenPair, access JwtToken, refresh JwtToken). The JwtToken
            records are unsaved; the caller persists them.
        """
        iat = int(datetime.now(UTC).timestamp())

        access_token, access_record = _mint(
            user_id, secret, TokenType.access, iat, access_ttl
        )
        refresh_token, refresh_record = _mint(
            user_id, secret, TokenType.refresh, iat, refresh_ttl
        )

        pair = cls(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=access_ttl,
        )
        return pair, access_record, refresh_record

    @staticmethod
    def decode(token: str, secret: str) -> Claims:
        """
        Verify signature and expiry and return the claims.

        Raises:
            AuthenticationError: expired, bad signature, malformed or
                otherwise unacceptable token
        """
        try:
            header = jwt.get_unverified_header(token)
            jwt.get_unverified_claims(token)
        except JWTError:
            raise AuthenticationError("Invalid token")

        if header.get("alg") != ALGORITHM:
            raise AuthenticationError("Invalid token")

        # Structure and alg are known good here, so a JWTError that is not a
        # claim error means the signature did not match
        try:
            payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
        except ExpiredSignatureError:
            raise AuthenticationError("Token has expired")
        except JWTClaimsError as exc:
            logger.debug(f"JWT claim validation failed: {exc}")
            raise AuthenticationError("Token validation failed", reason=str(exc))
        except JWTError:
            raise AuthenticationError("Invalid token signature")

        try:
            return Claims.model_validate(payload)
        except PydanticValidationError:
            raise AuthenticationError("Invalid token")

    @classmethod
    def extract_jti(cls, token: str, secret: str) -> UUID:
        claims = cls.decode(token, secret)
        try:
            return UUID(claims.jti)
        except ValueError:
            raise AuthenticationError("Invalid token")

    @classmethod
    def extract_user_id(cls, token: str, secret: str) -> UUID:
        claims = cls.decode(token, secret)
        try:
            return UUID(claims.sub)
        except ValueError:
            raise AuthenticationError("Invalid token")
