"""
User Management Use Cases

Profile and credential management for an authenticated user.
"""

from .change_password_use_case import ChangePasswordUseCase
from .get_profile_use_case import GetProfileUseCase
from .update_profile_use_case import UpdateProfileUseCase
from .dtos import ChangePasswordCommand, UpdateProfileCommand

__all__ = [
    "ChangePasswordUseCase",
    "GetProfileUseCase",
    "UpdateProfileUseCase",
    "ChangePasswordCommand",
    "UpdateProfileCommand",
]
