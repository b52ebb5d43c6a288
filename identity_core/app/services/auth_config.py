"""
Authentication configuration injected into the token engine and use cases.

The core never reads secrets or TTLs from globals; the bootstrap builds an
AuthConfig and passes it in.
"""

from pydantic import BaseModel, Field, field_validator

from identity_core.domain.value_objects import DEFAULT_BCRYPT_ROUNDS

MIN_SECRET_LENGTH = 32


class AuthConfig(BaseModel):
    jwt_secret: str
    access_token_ttl_seconds: int = Field(default=900, gt=0)
    refresh_token_ttl_seconds: int = Field(default=604800, gt=0)
    session_ttl_seconds: int = Field(default=86400, gt=0)
    bcrypt_rounds: int = Field(default=DEFAULT_BCRYPT_ROUNDS, ge=4, le=31)

    @field_validator("jwt_secret")
    @classmethod
    def _secret_length(cls, value: str) -> str:
        if len(value.encode("utf-8")) < MIN_SECRET_LENGTH:
            raise ValueError(
                f"JWT secret must be at least {MIN_SECRET_LENGTH} bytes"
            )
        return value

    @classmethod
    def from_application_config(cls, config) -> "AuthConfig":
        return cls(
            jwt_secret=config.JWT_SECRET,
            access_token_ttl_seconds=config.JWT_ACCESS_TTL_SECONDS,
            refresh_token_ttl_seconds=config.JWT_REFRESH_TTL_SECONDS,
            session_ttl_seconds=config.SESSION_TTL_SECONDS,
            bcrypt_rounds=config.BCRYPT_ROUNDS,
        )
