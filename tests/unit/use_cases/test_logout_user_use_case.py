from uuid import uuid4

import pytest

from identity_core.app.use_cases.auth import (
    LoginApiCommand,
    LoginUserUseCase,
    LoginWebCommand,
    LogoutUserUseCase,
    RegisterUserCommand,
    RegisterUserUseCase,
)

PASSWORD = "SecurePass123!"


async def register(uow, config):
    result = await RegisterUserUseCase(uow, config).execute(
        RegisterUserCommand(email="user@acme.com", password=PASSWORD, name="User")
    )
    return result.value


@pytest.mark.asyncio
async def test_logout_web_deletes_session(mock_uow):
    session_id = uuid4()

    result = await LogoutUserUseCase(mock_uow).logout_web(session_id)

    assert result.is_ok()
    mock_uow.sessions.delete.assert_called_once_with(session_id)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_logout_web_unknown_session_is_ok(memory_uow):
    result = await LogoutUserUseCase(memory_uow).logout_web(uuid4())
    assert result.is_ok()


@pytest.mark.asyncio
async def test_logout_api_revokes_all_tokens(mock_uow):
    user_id = uuid4()
    mock_uow.tokens.revoke_all_user_tokens.return_value = 4

    result = await LogoutUserUseCase(mock_uow).logout_api(user_id)

    assert result.is_ok()
    assert result.value == 4
    mock_uow.tokens.revoke_all_user_tokens.assert_called_once_with(user_id)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_logout_api_revokes_every_pair(memory_uow, auth_config):
    user = await register(memory_uow, auth_config)
    login = LoginUserUseCase(memory_uow, auth_config)
    for _ in range(2):
        await login.login_api(LoginApiCommand(email="user@acme.com", password=PASSWORD))

    result = await LogoutUserUseCase(memory_uow).logout_api(user.id)

    assert result.value == 4
    assert all(t.revoked for t in memory_uow.store.tokens.values())

    again = await LogoutUserUseCase(memory_uow).logout_api(user.id)
    assert again.value == 0


@pytest.mark.asyncio
async def test_logout_all(memory_uow, auth_config):
    user = await register(memory_uow, auth_config)
    login = LoginUserUseCase(memory_uow, auth_config)
    await login.login_web(LoginWebCommand(email="user@acme.com", password=PASSWORD))
    await login.login_api(LoginApiCommand(email="user@acme.com", password=PASSWORD))

    result = await LogoutUserUseCase(memory_uow).logout_all(user.id)

    assert result.is_ok()
    assert result.value.sessions_deleted == 1
    assert result.value.tokens_revoked == 2
    assert memory_uow.store.sessions == {}
