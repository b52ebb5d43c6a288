"""
Identity Core Domain Entities

Each entity in its own file. SQLModel tables double as domain entities.
"""

from .enums import TokenType

from .user import User
from .session import Session, SessionCookie
from .jwt_token import JwtToken
from .token_pair import Claims, TokenPair

__all__ = [
    # Enums
    "TokenType",
    # Entities
    "User",
    "Session",
    "JwtToken",
    # Value types
    "SessionCookie",
    "Claims",
    "TokenPair",
]
