import pytest
from unittest.mock import AsyncMock, MagicMock

from identity_core.adapter.repositories.in_memory import InMemoryStore
from identity_core.adapter.services.unit_of_work import InMemoryUnitOfWork
from identity_core.app.services.auth_config import AuthConfig

TEST_SECRET = "unit-test-secret-0123456789abcdef-xyz"


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    # Repositories: every method is awaitable
    uow.users = AsyncMock()
    uow.sessions = AsyncMock()
    uow.tokens = AsyncMock()
    return uow


@pytest.fixture
def auth_config():
    return AuthConfig(jwt_secret=TEST_SECRET, bcrypt_rounds=4)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def memory_uow(store):
    return InMemoryUnitOfWork(store)
