from contextlib import asynccontextmanager
from datetime import timedelta

import pytest

from identity_core.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from identity_core.domain.base import utc_now
from identity_core.domain.entities import Session, TokenPair, User
from identity_core.domain.value_objects import Email
from identity_core.jobs.cleanup import run_periodic_cleanup

SECRET = "cleanup-job-secret-0123456789abcdefgh"


@pytest.mark.asyncio
async def test_periodic_cleanup_against_sqlite(db_session):
    @asynccontextmanager
    async def uow_factory():
        yield SqlAlchemyUnitOfWork(db_session)

    user = User.create(Email("user@acme.com"), "SecurePass123!", "User", rounds=4)
    stale = Session.create(user.id)
    stale.expires_at = utc_now() - timedelta(seconds=1)
    _, expired_access, live_refresh = TokenPair.generate(user.id, SECRET, -10, 3600)

    uow = SqlAlchemyUnitOfWork(db_session)
    async with uow:
        await uow.users.save(user)
        await uow.sessions.save(stale)
        await uow.tokens.save(expired_access)
        await uow.tokens.save(live_refresh)
        await uow.commit()

    await run_periodic_cleanup(uow_factory, 0, max_iterations=1)

    async with uow:
        assert await uow.sessions.find_by_id(stale.id) is None
        assert await uow.tokens.find_by_jti(expired_access.jti) is None
        assert await uow.tokens.find_by_jti(live_refresh.jti) is not None
