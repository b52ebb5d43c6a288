from typing import List

from sqlmodel.ext.asyncio.session import AsyncSession

from identity_core.adapter.repositories.base import database_errors
from identity_core.adapter.repositories.in_memory import (
    InMemorySessionRepository,
    InMemoryStore,
    InMemoryTokenRepository,
    InMemoryUserRepository,
    JournalEntry,
    undo,
)
from identity_core.adapter.repositories.session_repository import SessionRepository
from identity_core.adapter.repositories.token_repository import TokenRepository
from identity_core.adapter.repositories.user_repository import UserRepository
from identity_core.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.sessions = SessionRepository(self.session)
        self.tokens = TokenRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        async with database_errors():
            await self.session.commit()

    async def rollback(self):
        await self.session.rollback()


class InMemoryUnitOfWork(UnitOfWork):
    """
    UnitOfWork over an InMemoryStore.

    Writes go straight to the store and are journaled; rollback undoes the
    writes made since enter or the last commit.
    """

    def __init__(self, store: InMemoryStore):
        self.store = store
        self.journal: List[JournalEntry] = []

    async def __aenter__(self):
        self.journal = []
        self.users = InMemoryUserRepository(self.store, self.journal)
        self.sessions = InMemorySessionRepository(self.store, self.journal)
        self.tokens = InMemoryTokenRepository(self.store, self.journal)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        self.journal.clear()

    async def rollback(self):
        undo(self.journal)
