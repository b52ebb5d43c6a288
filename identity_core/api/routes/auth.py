from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from identity_core.api.error import to_http_error
from identity_core.app.services.auth_config import AuthConfig
from identity_core.app.services.unit_of_work import UnitOfWork
from identity_core.app.use_cases.auth import (
    AuthenticatedUser,
    LoginApiCommand,
    LoginUserUseCase,
    LogoutUserUseCase,
    RefreshTokenCommand,
    RefreshTokenUseCase,
    RegisterUserCommand,
    RegisterUserUseCase,
    UserView,
)
from identity_core.app.use_cases.users import GetProfileUseCase
from identity_core.depends import get_auth_config, get_current_user, get_unit_of_work
from identity_core.domain.entities import TokenPair

router = APIRouter(prefix="/auth", tags=["Authentication"])


class RegisterRequest(BaseModel):
    """
    Register HTTP request payload

    Field rules (email format, password length, name) are enforced by the
    domain so clients get one set of messages.
    """

    email: str = Field(..., description="User email address")
    password: str = Field(..., description="User password (min 8 chars)")
    name: str = Field(..., description="Display name")


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=UserView)
async def register(
    request: RegisterRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    config: AuthConfig = Depends(get_auth_config),
):
    """
    Register a new user.

    Raises:
        - 400 Bad Request: Invalid email, password or name
        - 409 Conflict: Email already exists
        - 500 Internal Server Error: Server error
    """
    command = RegisterUserCommand(
        email=request.email, password=request.password, name=request.name
    )

    use_case = RegisterUserUseCase(uow, config)
    result = await use_case.execute(command)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


class LoginRequest(BaseModel):
    email: str = Field(..., description="User email address")
    password: str = Field(..., description="User password")


class LoginResponse(BaseModel):
    user: UserView
    access_token: str
    refresh_token: str
    token_type: str
    expires_in: int


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(
    request: LoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    config: AuthConfig = Depends(get_auth_config),
):
    """
    API login. Returns an access/refresh JWT pair.

    Raises:
        - 401 Unauthorized: Invalid credentials or inactive account
        - 500 Internal Server Error: Server error
    """
    use_case = LoginUserUseCase(uow, config)
    result = await use_case.login_api(
        LoginApiCommand(email=request.email, password=request.password)
    )

    if result.is_err():
        raise to_http_error(result.error)

    token_pair = result.value.token_pair
    return LoginResponse(
        user=result.value.user,
        access_token=token_pair.access_token,
        refresh_token=token_pair.refresh_token,
        token_type=token_pair.token_type,
        expires_in=token_pair.expires_in,
    )


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., description="Refresh token")


@router.post("/refresh", status_code=status.HTTP_200_OK, response_model=TokenPair)
async def refresh(
    request: RefreshRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    config: AuthConfig = Depends(get_auth_config),
):
    """
    Exchange a refresh token for a new pair. The presented token is revoked.

    Raises:
        - 401 Unauthorized: Invalid, revoked, expired or wrong-type token, or
          REAUTHENTICATION_REQUIRED when rotation could not complete
        - 500 Internal Server Error: Server error
    """
    use_case = RefreshTokenUseCase(uow, config)
    result = await use_case.execute(
        RefreshTokenCommand(refresh_token=request.refresh_token)
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    current_user: AuthenticatedUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Revoke every token of the authenticated user"""
    use_case = LogoutUserUseCase(uow)
    result = await use_case.logout_api(current_user.user_id)

    if result.is_err():
        raise to_http_error(result.error)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", status_code=status.HTTP_200_OK, response_model=UserView)
async def get_me(
    current_user: AuthenticatedUser = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    use_case = GetProfileUseCase(uow)
    result = await use_case.execute(current_user.user_id)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value
