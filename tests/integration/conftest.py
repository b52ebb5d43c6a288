import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from tests.fixtures.json_loader import TestDataLoader
from identity_core.depends import get_auth_config, get_unit_of_work
from identity_core.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from identity_core.app.services.auth_config import AuthConfig

INTEGRATION_SECRET = "integration-test-secret-0123456789abcdef"


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest.fixture
def auth_config():
    return AuthConfig(jwt_secret=INTEGRATION_SECRET, bcrypt_rounds=4)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session, auth_config):
    from httpx import ASGITransport
    from identity_core.api.app import create_app
    from config import ApplicationConfig

    class TestConfig(ApplicationConfig):
        API_PREFIX = ""
        ENABLE_CLEANUP_JOBS = False

    app = create_app(TestConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_auth_config] = lambda: auth_config

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
