"""
User Entity

Identity and credential state of a person who can log in.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from identity_core.domain.base import utc_now
from identity_core.domain.value_objects import (
    DEFAULT_BCRYPT_ROUNDS,
    Email,
    PasswordHash,
)
from identity_core.shared.errors import ValidationError

NAME_MAX_LENGTH = 255
BIO_MAX_LENGTH = 500
AVATAR_URL_SCHEMES = ("http://", "https://")


def _clean_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Name cannot be empty")
    if len(name) > NAME_MAX_LENGTH:
        raise ValidationError("Name must be 255 characters or less")
    return name


class User(SQLModel, table=True):
    """
    User entity - the only aggregate that holds credentials.

    Business Rules:
    - Email must be unique across all users (enforced by the store)
    - Password must be at least 8 characters, stored as bcrypt hash
    - New users start with email_verified=False and is_active=True
    - Inactive users cannot log in
    - Bio is optional, at most 500 characters
    - Avatar URL is optional and must be http or https
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars
    name: str = Field(max_length=255)
    bio: Optional[str] = Field(default=None, max_length=500)
    avatar_url: Optional[str] = Field(default=None)

    email_verified: bool = Field(default=False)
    is_active: bool = Field(default=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_users_created_at", "created_at"),
        Index("idx_users_is_active", "is_active"),
    )

    @classmethod
    def create(
        cls,
        email: Email,
        password: str,
        name: str,
        rounds: int = DEFAULT_BCRYPT_ROUNDS,
    ) -> "User":
        """
        Build a new, unsaved user.

        Raises:
            ValidationError: name empty/too long, password too short/long
            InternalError: bcrypt failure
        """
        name = _clean_name(name)
        password_hash = PasswordHash.from_plain(password, rounds)
        now = utc_now()

        return cls(
            email=email.value,
            password_hash=password_hash.value,
            name=name,
            email_verified=False,
            is_active=True,
            created_at=now,
            updated_at=now,
        )

    def verify_password(self, password: str) -> bool:
        return PasswordHash.from_hash(self.password_hash).verify(password)

    def change_password(
        self, new_password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS
    ) -> None:
        self.password_hash = PasswordHash.from_plain(new_password, rounds).value
        self.updated_at = utc_now()

    def update_name(self, name: str) -> None:
        self.name = _clean_name(name)
        self.updated_at = utc_now()

    def update_bio(self, bio: Optional[str]) -> None:
        if bio is not None and len(bio) > BIO_MAX_LENGTH:
            raise ValidationError("Bio cannot exceed 500 characters")
        self.bio = bio
        self.updated_at = utc_now()

    def update_avatar(self, avatar_url: Optional[str]) -> None:
        if avatar_url is not None and not avatar_url.startswith(AVATAR_URL_SCHEMES):
            raise ValidationError("Avatar URL must be a valid HTTP/HTTPS URL")
        self.avatar_url = avatar_url
        self.updated_at = utc_now()

    def verify_email(self) -> None:
        self.email_verified = True
        self.updated_at = utc_now()

    def deactivate(self) -> None:
        self.is_active = False
        self.updated_at = utc_now()

    def reactivate(self) -> None:
        self.is_active = True
        self.updated_at = utc_now()

    def can_login(self) -> bool:
        return self.is_active
