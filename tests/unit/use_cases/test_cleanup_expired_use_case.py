from datetime import timedelta
from uuid import uuid4

import pytest

from identity_core.app.use_cases.maintenance import CleanupExpiredUseCase
from identity_core.domain.base import utc_now
from identity_core.domain.entities import Session, TokenPair


@pytest.mark.asyncio
async def test_cleanup_reports_counts(mock_uow):
    mock_uow.sessions.delete_expired.return_value = 3
    mock_uow.tokens.delete_expired.return_value = 7

    result = await CleanupExpiredUseCase(mock_uow).execute()

    assert result.is_ok()
    assert result.value.model_dump() == {"sessions_deleted": 3, "tokens_deleted": 7}
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_cleanup_single_target(mock_uow):
    mock_uow.tokens.delete_expired.return_value = 2

    result = await CleanupExpiredUseCase(mock_uow).execute(sessions=False)

    assert result.value.sessions_deleted == 0
    assert result.value.tokens_deleted == 2
    mock_uow.sessions.delete_expired.assert_not_called()


@pytest.mark.asyncio
async def test_cleanup_removes_only_expired(memory_uow, auth_config):
    live = Session.create(uuid4())
    stale = Session.create(uuid4())
    stale.expires_at = utc_now() - timedelta(seconds=1)
    _, access, refresh = TokenPair.generate(uuid4(), auth_config.jwt_secret, -10, 3600)

    async with memory_uow:
        for session in (live, stale):
            await memory_uow.sessions.save(session)
        for token in (access, refresh):
            await memory_uow.tokens.save(token)
        await memory_uow.commit()

    result = await CleanupExpiredUseCase(memory_uow).execute()

    assert result.value.sessions_deleted == 1
    assert result.value.tokens_deleted == 1
    assert list(memory_uow.store.sessions) == [live.id]
    assert list(memory_uow.store.tokens) == [refresh.jti]
