"""
In-memory repositories

Dict-backed implementations of the repository interfaces, used by tests and
by embedders that do not need durability. Records are copied on the way in
and out so callers never share mutable state with the store, the way rows
read back from SQL are fresh objects.

Every write is recorded in the owning unit of work's journal so a rollback
undoes exactly the writes of that unit of work.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, TypeVar
from uuid import UUID

from sqlmodel import SQLModel

from identity_core.app.repositories.session_repository import ISessionRepository
from identity_core.app.repositories.token_repository import ITokenRepository
from identity_core.app.repositories.user_repository import IUserRepository
from identity_core.domain.entities import JwtToken, Session, User
from identity_core.domain.value_objects import Email
from identity_core.shared.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=SQLModel)

# (table, key, previous row or None)
JournalEntry = Tuple[Dict[UUID, Any], UUID, Optional[Any]]


def _copy(entity: M) -> M:
    return type(entity).model_validate(entity.model_dump())


@dataclass
class InMemoryStore:
    """Shared tables for one in-memory backend"""

    users: Dict[UUID, User] = field(default_factory=dict)
    sessions: Dict[UUID, Session] = field(default_factory=dict)
    tokens: Dict[UUID, JwtToken] = field(default_factory=dict)


def undo(journal: List[JournalEntry]) -> None:
    while journal:
        table, key, previous = journal.pop()
        if previous is None:
            table.pop(key, None)
        else:
            table[key] = previous


class _JournaledRepository:
    table: Dict[UUID, Any]

    def __init__(self, store: InMemoryStore, journal: List[JournalEntry]):
        self.store = store
        self.journal = journal

    def _put(self, key: UUID, row: Any) -> None:
        self.journal.append((self.table, key, self.table.get(key)))
        self.table[key] = _copy(row)

    def _remove(self, key: UUID) -> bool:
        previous = self.table.pop(key, None)
        if previous is None:
            return False
        self.journal.append((self.table, key, previous))
        return True


class InMemoryUserRepository(_JournaledRepository, IUserRepository):
    @property
    def table(self) -> Dict[UUID, User]:
        return self.store.users

    async def save(self, user: User) -> User:
        if user.id in self.table:
            raise ConflictError("User already exists")
        if any(u.email == user.email for u in self.table.values()):
            raise ConflictError("Email already exists")

        self._put(user.id, user)
        return _copy(user)

    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        user = self.table.get(user_id)
        return _copy(user) if user else None

    async def find_by_email(self, email: Email) -> Optional[User]:
        for user in self.table.values():
            if user.email == email.value:
                return _copy(user)
        return None

    async def update(self, user: User) -> User:
        if user.id not in self.table:
            raise NotFoundError("User not found")
        if any(u.email == user.email and u.id != user.id for u in self.table.values()):
            raise ConflictError("Email already exists")

        self._put(user.id, user)
        return _copy(user)

    async def delete(self, user_id: UUID) -> None:
        if not self._remove(user_id):
            raise NotFoundError("User not found")


class InMemorySessionRepository(_JournaledRepository, ISessionRepository):
    @property
    def table(self) -> Dict[UUID, Session]:
        return self.store.sessions

    async def save(self, session: Session) -> Session:
        for other in list(self.table.values()):
            if other.user_id == session.user_id and other.id != session.id:
                self._remove(other.id)

        if session.id in self.table:
            raise ConflictError("Session already exists")

        self._put(session.id, session)
        return _copy(session)

    async def find_by_id(self, session_id: UUID) -> Optional[Session]:
        session = self.table.get(session_id)
        return _copy(session) if session else None

    async def find_by_user_id(self, user_id: UUID) -> Optional[Session]:
        sessions = [s for s in self.table.values() if s.user_id == user_id]
        if not sessions:
            return None
        return _copy(max(sessions, key=lambda s: s.created_at))

    async def update(self, session: Session) -> Session:
        if session.id not in self.table:
            raise NotFoundError("Session not found")

        self._put(session.id, session)
        return _copy(session)

    async def delete(self, session_id: UUID) -> None:
        if not self._remove(session_id):
            logger.warning(f"Session {session_id} already gone")

    async def delete_by_user_id(self, user_id: UUID) -> int:
        doomed = [s.id for s in self.table.values() if s.user_id == user_id]
        for session_id in doomed:
            self._remove(session_id)
        return len(doomed)

    async def delete_expired(self) -> int:
        doomed = [s.id for s in self.table.values() if s.is_expired()]
        for session_id in doomed:
            self._remove(session_id)
        return len(doomed)


class InMemoryTokenRepository(_JournaledRepository, ITokenRepository):
    """Ledger keyed by jti"""

    @property
    def table(self) -> Dict[UUID, JwtToken]:
        return self.store.tokens

    async def save(self, token: JwtToken) -> JwtToken:
        if token.jti in self.table:
            raise ConflictError("Token already exists")

        self._put(token.jti, token)
        return _copy(token)

    async def find_by_jti(self, jti: UUID) -> Optional[JwtToken]:
        token = self.table.get(jti)
        return _copy(token) if token else None

    async def revoke(self, jti: UUID) -> bool:
        token = self.table.get(jti)
        if token is None or token.revoked:
            logger.warning(f"No live token with jti {jti} to revoke")
            return False

        revoked = _copy(token)
        revoked.revoke()
        self._put(jti, revoked)
        return True

    async def revoke_all_user_tokens(self, user_id: UUID) -> int:
        count = 0
        for token in list(self.table.values()):
            if token.user_id == user_id and not token.revoked:
                revoked = _copy(token)
                revoked.revoke()
                self._put(token.jti, revoked)
                count += 1
        return count

    async def delete_expired(self) -> int:
        doomed = [t.jti for t in self.table.values() if t.is_expired()]
        for jti in doomed:
            self._remove(jti)
        return len(doomed)
