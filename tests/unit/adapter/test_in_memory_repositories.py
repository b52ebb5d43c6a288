import logging
from uuid import uuid4

import pytest

from identity_core.adapter.repositories.in_memory import InMemoryStore
from identity_core.adapter.services.unit_of_work import InMemoryUnitOfWork
from identity_core.domain.entities import Session, TokenPair, User
from identity_core.domain.value_objects import Email
from identity_core.shared.errors import ConflictError, NotFoundError

SECRET = "in-memory-test-secret-0123456789abcdef"


def make_user(email: str = "user@acme.com") -> User:
    return User.create(Email(email), "SecurePass123!", "User", rounds=4)


@pytest.mark.asyncio
async def test_user_email_is_unique(memory_uow):
    async with memory_uow:
        await memory_uow.users.save(make_user())
        with pytest.raises(ConflictError):
            await memory_uow.users.save(make_user())


@pytest.mark.asyncio
async def test_returned_entities_are_copies(memory_uow):
    user = make_user()
    async with memory_uow:
        await memory_uow.users.save(user)
        found = await memory_uow.users.find_by_email(Email("USER@acme.com"))
        found.name = "Changed without update"
        again = await memory_uow.users.find_by_id(user.id)

    assert found.id == user.id
    assert again.name == "User"


@pytest.mark.asyncio
async def test_update_and_delete_missing_user(memory_uow):
    async with memory_uow:
        with pytest.raises(NotFoundError):
            await memory_uow.users.update(make_user())
        with pytest.raises(NotFoundError):
            await memory_uow.users.delete(uuid4())


@pytest.mark.asyncio
async def test_session_save_replaces_previous_session(memory_uow):
    user_id = uuid4()
    first = Session.create(user_id)
    second = Session.create(user_id)
    other_user = Session.create(uuid4())

    async with memory_uow:
        for session in (first, other_user, second):
            await memory_uow.sessions.save(session)
        latest = await memory_uow.sessions.find_by_user_id(user_id)
        await memory_uow.commit()

    assert latest.id == second.id
    assert set(memory_uow.store.sessions) == {second.id, other_user.id}


@pytest.mark.asyncio
async def test_token_jti_is_unique_and_revoke_reports_noop(memory_uow):
    _, access, _ = TokenPair.generate(uuid4(), SECRET, 900, 3600)

    async with memory_uow:
        await memory_uow.tokens.save(access)
        with pytest.raises(ConflictError):
            await memory_uow.tokens.save(access)

        assert await memory_uow.tokens.revoke(access.jti) is True
        assert await memory_uow.tokens.revoke(access.jti) is False
        assert await memory_uow.tokens.revoke(uuid4()) is False


@pytest.mark.asyncio
async def test_rollback_undoes_uncommitted_writes():
    store = InMemoryStore()
    uow = InMemoryUnitOfWork(store)
    committed = make_user("kept@acme.com")

    async with uow:
        await uow.users.save(committed)
        await uow.commit()
        await uow.users.save(make_user("dropped@acme.com"))
        await uow.users.delete(committed.id)

    assert list(store.users) == [committed.id]


@pytest.mark.asyncio
async def test_rollback_leaves_other_units_of_work_alone():
    store = InMemoryStore()
    _, access, _ = TokenPair.generate(uuid4(), SECRET, 900, 3600)

    first = InMemoryUnitOfWork(store)
    second = InMemoryUnitOfWork(store)

    async with first:
        await first.tokens.save(access)
        await first.commit()

    async with second:
        async with first:
            await first.tokens.revoke(access.jti)
            await first.commit()
        await second.sessions.save(Session.create(uuid4()))

    assert store.tokens[access.jti].revoked is True
    assert store.sessions == {}


@pytest.mark.asyncio
async def test_deleting_absent_session_logs_warning(memory_uow, caplog):
    async with memory_uow:
        with caplog.at_level(logging.WARNING):
            await memory_uow.sessions.delete(uuid4())

    assert any(
        record.levelno == logging.WARNING and "already gone" in record.message
        for record in caplog.records
    )
