from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Optional
from uuid import UUID

from fastapi import Depends, Header, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from identity_core.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from identity_core.api.error import ClientError, to_http_error
from identity_core.app.services.auth_config import AuthConfig
from identity_core.app.services.unit_of_work import UnitOfWork
from identity_core.app.use_cases.auth import (
    AuthenticateAccessTokenUseCase,
    AuthenticateSessionUseCase,
    AuthenticatedSession,
    AuthenticatedUser,
)
from identity_core.shared.result import Error

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)

CSRF_HEADER = "X-CSRF-Token"


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


@lru_cache(maxsize=1)
def get_auth_config() -> AuthConfig:
    return AuthConfig.from_application_config(ApplicationConfig)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    uow: UnitOfWork = Depends(get_unit_of_work),
    config: AuthConfig = Depends(get_auth_config),
) -> AuthenticatedUser:
    """
    Dependency to authenticate the Bearer access token.

    The token must verify, be an access token, and have a live record in the
    revocation ledger.

    Raises:
        ClientError: 401 if the header is missing or the token is rejected
    """
    if credentials is None:
        raise ClientError(
            Error("AUTHENTICATION_ERROR", "Missing bearer token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    use_case = AuthenticateAccessTokenUseCase(uow, config)
    result = await use_case.execute(credentials.credentials)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


def _session_id_from_cookie(request: Request) -> UUID:
    raw = request.cookies.get(ApplicationConfig.SESSION_COOKIE_NAME)
    try:
        return UUID(raw or "")
    except ValueError:
        raise ClientError(
            Error("AUTHENTICATION_ERROR", "Session not found"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )


async def get_current_session(
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    config: AuthConfig = Depends(get_auth_config),
) -> AuthenticatedSession:
    """Resolve the session cookie and slide its expiry"""
    use_case = AuthenticateSessionUseCase(uow, config)
    result = await use_case.execute(_session_id_from_cookie(request), slide=True)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


async def get_csrf_protected_session(
    request: Request,
    csrf_token: Optional[str] = Header(default=None, alias=CSRF_HEADER),
    uow: UnitOfWork = Depends(get_unit_of_work),
    config: AuthConfig = Depends(get_auth_config),
) -> AuthenticatedSession:
    """Resolve the session cookie for a state-changing request"""
    use_case = AuthenticateSessionUseCase(uow, config)
    result = await use_case.execute(
        _session_id_from_cookie(request), csrf_token=csrf_token, require_csrf=True
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@asynccontextmanager
async def unit_of_work_scope():
    """Unit of work outside a request, for background jobs"""
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)
