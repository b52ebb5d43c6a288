"""
Use Cases

Organized into domain folders:
- auth/: Registration, login, logout, refresh and request authentication
- users/: Profile and password management
- maintenance/: Storage hygiene
"""

from .auth import (
    RegisterUserUseCase,
    LoginUserUseCase,
    LogoutUserUseCase,
    RefreshTokenUseCase,
    AuthenticateAccessTokenUseCase,
    AuthenticateSessionUseCase,
)
from .users import (
    ChangePasswordUseCase,
    GetProfileUseCase,
    UpdateProfileUseCase,
)
from .maintenance import CleanupExpiredUseCase

__all__ = [
    # Auth
    "RegisterUserUseCase",
    "LoginUserUseCase",
    "LogoutUserUseCase",
    "RefreshTokenUseCase",
    "AuthenticateAccessTokenUseCase",
    "AuthenticateSessionUseCase",
    # Users
    "ChangePasswordUseCase",
    "GetProfileUseCase",
    "UpdateProfileUseCase",
    # Maintenance
    "CleanupExpiredUseCase",
]
