"""
Cookie-session routes for the browser client.

Login sets an HttpOnly session cookie and hands the CSRF token to the page;
state-changing requests must echo it in the X-CSRF-Token header.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from identity_core.api.error import to_http_error
from identity_core.app.services.auth_config import AuthConfig
from identity_core.app.services.unit_of_work import UnitOfWork
from identity_core.app.use_cases.auth import (
    AuthenticatedSession,
    LoginUserUseCase,
    LoginWebCommand,
    LogoutAllResult,
    LogoutUserUseCase,
    UserView,
)
from identity_core.app.use_cases.users import GetProfileUseCase
from identity_core.depends import (
    get_auth_config,
    get_csrf_protected_session,
    get_current_session,
    get_unit_of_work,
)
from identity_core.domain.entities import SessionCookie

router = APIRouter(prefix="/web", tags=["Web Session"])


class WebLoginRequest(BaseModel):
    email: str = Field(..., description="User email address")
    password: str = Field(..., description="User password")


class WebLoginResponse(BaseModel):
    user: UserView
    csrf_token: str
    expires_at: datetime


@router.post("/login", status_code=status.HTTP_200_OK, response_model=WebLoginResponse)
async def web_login(
    request: WebLoginRequest,
    http_request: Request,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
    config: AuthConfig = Depends(get_auth_config),
):
    """
    Web login. Replaces any previous session of the user.

    Raises:
        - 401 Unauthorized: Invalid credentials or inactive account
        - 500 Internal Server Error: Server error
    """
    command = LoginWebCommand(
        email=request.email,
        password=request.password,
        ip_address=http_request.client.host if http_request.client else None,
        user_agent=http_request.headers.get("user-agent"),
    )

    use_case = LoginUserUseCase(uow, config)
    result = await use_case.login_web(command)

    if result.is_err():
        raise to_http_error(result.error)

    cookie = SessionCookie.from_session(result.value.session)
    response.set_cookie(
        key=ApplicationConfig.SESSION_COOKIE_NAME,
        value=str(cookie.session_id),
        max_age=config.session_ttl_seconds,
        httponly=True,
        secure=ApplicationConfig.SESSION_COOKIE_SECURE,
        samesite="lax",
    )

    return WebLoginResponse(
        user=result.value.user,
        csrf_token=cookie.csrf_token,
        expires_at=result.value.session.expires_at,
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def web_logout(
    session: AuthenticatedSession = Depends(get_csrf_protected_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    use_case = LogoutUserUseCase(uow)
    result = await use_case.logout_web(session.session_id)

    if result.is_err():
        raise to_http_error(result.error)

    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(ApplicationConfig.SESSION_COOKIE_NAME)
    return response


@router.post("/logout-all", status_code=status.HTTP_200_OK, response_model=LogoutAllResult)
async def web_logout_all(
    response: Response,
    session: AuthenticatedSession = Depends(get_csrf_protected_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Delete every session and revoke every token of the user"""
    use_case = LogoutUserUseCase(uow)
    result = await use_case.logout_all(session.user_id)

    if result.is_err():
        raise to_http_error(result.error)

    response.delete_cookie(ApplicationConfig.SESSION_COOKIE_NAME)
    return result.value


@router.get("/me", status_code=status.HTTP_200_OK, response_model=UserView)
async def web_me(
    session: AuthenticatedSession = Depends(get_current_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    use_case = GetProfileUseCase(uow)
    result = await use_case.execute(session.user_id)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value
