"""
Authentication Use Cases

Registration, login (web and API), logout, token refresh and request
authentication.
"""

from .register_user_use_case import RegisterUserUseCase
from .login_user_use_case import LoginUserUseCase
from .logout_user_use_case import LogoutUserUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .authenticate_use_case import (
    AuthenticateAccessTokenUseCase,
    AuthenticateSessionUseCase,
)
from .dtos import (
    RegisterUserCommand,
    LoginWebCommand,
    LoginApiCommand,
    RefreshTokenCommand,
    UserView,
    WebLoginResult,
    ApiLoginResult,
    LogoutAllResult,
    AuthenticatedUser,
    AuthenticatedSession,
)

__all__ = [
    # Use Cases
    "RegisterUserUseCase",
    "LoginUserUseCase",
    "LogoutUserUseCase",
    "RefreshTokenUseCase",
    "AuthenticateAccessTokenUseCase",
    "AuthenticateSessionUseCase",
    # DTOs - Commands
    "RegisterUserCommand",
    "LoginWebCommand",
    "LoginApiCommand",
    "RefreshTokenCommand",
    # DTOs - Responses
    "UserView",
    "WebLoginResult",
    "ApiLoginResult",
    "LogoutAllResult",
    "AuthenticatedUser",
    "AuthenticatedSession",
]
