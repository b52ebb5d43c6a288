"""
Identity Value Objects

Self-validating primitives used by the User and Session entities.
"""

import base64
import hmac
import secrets

import bcrypt
from email_validator import EmailNotValidError, validate_email

from identity_core.shared.errors import InternalError, ValidationError

DEFAULT_BCRYPT_ROUNDS = 12


class Email:
    """
    Normalized email address.

    Business Rules:
    - Trimmed and lower-cased on construction
    - Max 255 characters
    - Must be syntactically valid (no DNS/deliverability check)
    """

    MAX_LENGTH = 255

    __slots__ = ("_value",)

    def __init__(self, raw: str):
        value = (raw or "").strip().lower()

        if not value:
            raise ValidationError("Email cannot be empty")

        if len(value) > self.MAX_LENGTH:
            raise ValidationError("Email must be 255 characters or less")

        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            raise ValidationError("Invalid email format")

        object.__setattr__(self, "_value", value)

    @classmethod
    def new(cls, raw: str) -> "Email":
        return cls(raw)

    def __setattr__(self, name, value):
        raise AttributeError("Email is immutable")

    @property
    def value(self) -> str:
        return self._value

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"Email({self._value!r})"

    def __eq__(self, other) -> bool:
        if isinstance(other, Email):
            return self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)


class PasswordHash:
    """
    Bcrypt password hash.

    The plaintext is never stored; verify() is the only comparison.
    Bcrypt only consumes the first 72 bytes of input, so longer passwords
    are rejected instead of being silently truncated.
    """

    MIN_LENGTH = 8
    MAX_BYTES = 72

    __slots__ = ("_hash",)

    def __init__(self, hashed: str):
        self._hash = hashed

    @classmethod
    def from_plain(cls, password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> "PasswordHash":
        if password is None or len(password) < cls.MIN_LENGTH:
            raise ValidationError(
                f"Password must be at least {cls.MIN_LENGTH} characters"
            )

        encoded = password.encode("utf-8")
        if len(encoded) > cls.MAX_BYTES:
            raise ValidationError(f"Password must be at most {cls.MAX_BYTES} bytes")

        try:
            hashed = bcrypt.hashpw(encoded, bcrypt.gensalt(rounds))
        except ValueError as exc:
            raise InternalError("Failed to hash password", reason=str(exc))

        return cls(hashed.decode("utf-8"))

    @classmethod
    def from_hash(cls, hashed: str) -> "PasswordHash":
        """Wrap an already-hashed value, e.g. loaded from storage"""
        return cls(hashed)

    def verify(self, candidate: str) -> bool:
        encoded = (candidate or "").encode("utf-8")
        if len(encoded) > self.MAX_BYTES:
            return False

        try:
            return bcrypt.checkpw(encoded, self._hash.encode("utf-8"))
        except ValueError as exc:
            raise InternalError("Failed to verify password", reason=str(exc))

    @property
    def value(self) -> str:
        return self._hash

    def __str__(self) -> str:
        return self._hash

    def __repr__(self) -> str:
        return "PasswordHash(***)"


class CsrfToken:
    """256-bit random token, URL-safe base64 without padding"""

    TOKEN_BYTES = 32

    __slots__ = ("_value",)

    def __init__(self, value: str):
        self._value = value

    @classmethod
    def generate(cls) -> "CsrfToken":
        raw = secrets.token_bytes(cls.TOKEN_BYTES)
        return cls(base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii"))

    @classmethod
    def from_string(cls, value: str) -> "CsrfToken":
        return cls(value)

    def verify(self, candidate: str) -> bool:
        # Only the length check may leak timing
        if candidate is None or len(candidate) != len(self._value):
            return False
        return hmac.compare_digest(
            self._value.encode("utf-8"), candidate.encode("utf-8")
        )

    @property
    def value(self) -> str:
        return self._value

    def __str__(self) -> str:
        return self._value

    def __eq__(self, other) -> bool:
        if isinstance(other, CsrfToken):
            return hmac.compare_digest(
                self._value.encode("utf-8"), other._value.encode("utf-8")
            )
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)
