from datetime import timedelta
from uuid import uuid4

import pytest

from identity_core.app.use_cases.auth import (
    AuthenticateAccessTokenUseCase,
    AuthenticateSessionUseCase,
)
from identity_core.domain.base import utc_now
from identity_core.domain.entities import Session, TokenPair


@pytest.mark.asyncio
async def test_valid_access_token(mock_uow, auth_config):
    user_id = uuid4()
    pair, access, _ = TokenPair.generate(user_id, auth_config.jwt_secret, 900, 3600)
    mock_uow.tokens.find_by_jti.return_value = access

    result = await AuthenticateAccessTokenUseCase(mock_uow, auth_config).execute(
        pair.access_token
    )

    assert result.is_ok()
    assert result.value.user_id == user_id
    assert result.value.jti == access.jti


@pytest.mark.asyncio
async def test_refresh_token_is_not_an_access_token(mock_uow, auth_config):
    pair, _, _ = TokenPair.generate(uuid4(), auth_config.jwt_secret, 900, 3600)

    result = await AuthenticateAccessTokenUseCase(mock_uow, auth_config).execute(
        pair.refresh_token
    )

    assert result.error.message == "Invalid token type, expected access token"


@pytest.mark.asyncio
async def test_access_token_missing_from_ledger(mock_uow, auth_config):
    pair, _, _ = TokenPair.generate(uuid4(), auth_config.jwt_secret, 900, 3600)
    mock_uow.tokens.find_by_jti.return_value = None

    result = await AuthenticateAccessTokenUseCase(mock_uow, auth_config).execute(
        pair.access_token
    )

    assert result.error.message == "Token not found"


@pytest.mark.asyncio
async def test_revoked_access_token(mock_uow, auth_config):
    pair, access, _ = TokenPair.generate(uuid4(), auth_config.jwt_secret, 900, 3600)
    access.revoke()
    mock_uow.tokens.find_by_jti.return_value = access

    result = await AuthenticateAccessTokenUseCase(mock_uow, auth_config).execute(
        pair.access_token
    )

    assert result.error.code == "AUTHENTICATION_ERROR"
    assert result.error.message == "Token has been revoked"


@pytest.mark.asyncio
async def test_valid_session(mock_uow, auth_config):
    session = Session.create(uuid4())
    mock_uow.sessions.find_by_id.return_value = session

    result = await AuthenticateSessionUseCase(mock_uow, auth_config).execute(session.id)

    assert result.is_ok()
    assert result.value.session_id == session.id
    assert result.value.user_id == session.user_id
    mock_uow.sessions.update.assert_not_called()


@pytest.mark.asyncio
async def test_missing_session(mock_uow, auth_config):
    mock_uow.sessions.find_by_id.return_value = None

    result = await AuthenticateSessionUseCase(mock_uow, auth_config).execute(uuid4())

    assert result.error.message == "Session not found"


@pytest.mark.asyncio
async def test_expired_session(mock_uow, auth_config):
    session = Session.create(uuid4())
    session.expires_at = utc_now() - timedelta(seconds=1)
    mock_uow.sessions.find_by_id.return_value = session

    result = await AuthenticateSessionUseCase(mock_uow, auth_config).execute(session.id)

    assert result.error.message == "Session has expired"


@pytest.mark.asyncio
@pytest.mark.parametrize("csrf_token", [None, "", "wrong-token"])
async def test_csrf_required(mock_uow, auth_config, csrf_token):
    session = Session.create(uuid4())
    mock_uow.sessions.find_by_id.return_value = session

    result = await AuthenticateSessionUseCase(mock_uow, auth_config).execute(
        session.id, csrf_token=csrf_token, require_csrf=True
    )

    assert result.error.message == "Invalid CSRF token"


@pytest.mark.asyncio
async def test_csrf_accepted(mock_uow, auth_config):
    session = Session.create(uuid4())
    mock_uow.sessions.find_by_id.return_value = session

    result = await AuthenticateSessionUseCase(mock_uow, auth_config).execute(
        session.id, csrf_token=session.csrf_token, require_csrf=True
    )

    assert result.is_ok()


@pytest.mark.asyncio
async def test_slide_extends_expiry(mock_uow, auth_config):
    session = Session.create(uuid4(), ttl_seconds=60)
    mock_uow.sessions.find_by_id.return_value = session
    mock_uow.sessions.update.side_effect = lambda s: s

    result = await AuthenticateSessionUseCase(mock_uow, auth_config).execute(
        session.id, slide=True
    )

    assert result.is_ok()
    assert result.value.expires_at > utc_now() + timedelta(seconds=3600)
    mock_uow.sessions.update.assert_called_once()
    mock_uow.commit.assert_called_once()
