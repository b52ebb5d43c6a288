import logging
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from identity_core.adapter.repositories.session_repository import SessionRepository
from identity_core.adapter.repositories.token_repository import TokenRepository
from identity_core.adapter.repositories.user_repository import UserRepository
from identity_core.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from identity_core.app.use_cases.auth import LogoutUserUseCase
from identity_core.domain.value_objects import Email
from identity_core.shared.errors import ConflictError, InternalError


def locked(statement: str = "UPDATE jwt_tokens") -> OperationalError:
    return OperationalError(statement, None, Exception("database is locked"))


@pytest.fixture
def mock_session():
    """AsyncSession stand-in; every awaitable method succeeds unless overridden"""
    session = MagicMock()
    for name in ("execute", "exec", "flush", "commit", "rollback", "refresh", "get", "merge"):
        setattr(session, name, AsyncMock())
    return session


@pytest.mark.asyncio
async def test_commit_failure_becomes_internal_error(mock_session):
    mock_session.commit.side_effect = locked("COMMIT")
    uow = SqlAlchemyUnitOfWork(mock_session)

    async with uow:
        with pytest.raises(InternalError) as exc_info:
            await uow.commit()

    assert exc_info.value.message == "Database error"
    assert "database is locked" in exc_info.value.reason


@pytest.mark.asyncio
async def test_bulk_update_failure_becomes_internal_error(mock_session):
    mock_session.execute.side_effect = locked()

    with pytest.raises(InternalError):
        await TokenRepository(mock_session).revoke_all_user_tokens(uuid4())
    with pytest.raises(InternalError):
        await TokenRepository(mock_session).revoke(uuid4())
    with pytest.raises(InternalError):
        await SessionRepository(mock_session).delete_by_user_id(uuid4())


@pytest.mark.asyncio
async def test_select_failure_becomes_internal_error(mock_session):
    mock_session.exec.side_effect = locked("SELECT users")

    with pytest.raises(InternalError):
        await UserRepository(mock_session).find_by_email(Email("user@acme.com"))
    with pytest.raises(InternalError):
        await TokenRepository(mock_session).find_by_jti(uuid4())


@pytest.mark.asyncio
async def test_integrity_violation_on_flush_becomes_conflict(mock_session):
    mock_session.flush.side_effect = IntegrityError(
        "INSERT INTO jwt_tokens", None, Exception("UNIQUE constraint failed")
    )

    with pytest.raises(ConflictError) as exc_info:
        await TokenRepository(mock_session).save(MagicMock())

    assert exc_info.value.message == "Token already exists"


@pytest.mark.asyncio
async def test_logout_with_failing_store_returns_error_result(mock_session):
    mock_session.execute.side_effect = locked()

    result = await LogoutUserUseCase(SqlAlchemyUnitOfWork(mock_session)).logout_api(uuid4())

    assert result.is_err()
    assert result.error.code == "INTERNAL_ERROR"
    mock_session.commit.assert_not_called()
    mock_session.rollback.assert_awaited()


@pytest.mark.asyncio
async def test_deleting_absent_session_logs_warning(mock_session, caplog):
    mock_session.execute.return_value = MagicMock(rowcount=0)

    with caplog.at_level(logging.WARNING):
        await SessionRepository(mock_session).delete(uuid4())

    assert any(
        record.levelno == logging.WARNING and "already gone" in record.message
        for record in caplog.records
    )
