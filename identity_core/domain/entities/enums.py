"""
Identity Core Domain Enums
"""

from enum import Enum


class TokenType(str, Enum):
    """Kind of issued JWT"""

    access = "access"
    refresh = "refresh"
