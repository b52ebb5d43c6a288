"""
Login User Use Case

Authenticates a user by password and issues either a web session or a JWT
token pair.
"""

import logging
from functools import lru_cache

from identity_core.app.services.auth_config import AuthConfig
from identity_core.app.services.unit_of_work import UnitOfWork
from identity_core.app.services.worker_pool import run_cpu_bound
from identity_core.domain.entities import Session, TokenPair, User
from identity_core.domain.value_objects import Email, PasswordHash
from identity_core.shared.errors import AppError, AuthenticationError, ValidationError
from identity_core.shared.result import Result, Return
from .dtos import (
    ApiLoginResult,
    LoginApiCommand,
    LoginWebCommand,
    UserView,
    WebLoginResult,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
ACCOUNT_INACTIVE = "Account is not active"


@lru_cache(maxsize=None)
def _dummy_hash(rounds: int) -> PasswordHash:
    return PasswordHash.from_plain("timing-equalization-dummy", rounds)


def _verify_dummy(password: str, rounds: int) -> bool:
    return _dummy_hash(rounds).verify(password)


class LoginUserUseCase:
    """
    Use case for user login, web and API.

    Business Rules:
    - Unknown email, malformed email and wrong password fail identically
    - A bcrypt check runs even for unknown emails so timing does not reveal
      which accounts exist
    - Inactive accounts fail with a distinct message
    - Web: prior sessions of the user are deleted before the new one is saved
    - API: both minted JwtToken records are saved to the revocation ledger
    """

    def __init__(self, uow: UnitOfWork, config: AuthConfig):
        self.uow = uow
        self.config = config

    async def _verify_credentials(self, raw_email: str, password: str) -> User:
        rounds = self.config.bcrypt_rounds

        try:
            email = Email(raw_email)
        except ValidationError:
            await run_cpu_bound(_verify_dummy, password, rounds)
            logger.warning("Login failed: malformed email")
            raise AuthenticationError(INVALID_CREDENTIALS)

        user = await self.uow.users.find_by_email(email)
        if user is None:
            await run_cpu_bound(_verify_dummy, password, rounds)
            logger.warning("Login failed: unknown email")
            raise AuthenticationError(INVALID_CREDENTIALS)

        password_valid = await run_cpu_bound(user.verify_password, password)
        if not password_valid:
            logger.warning(f"Login failed: wrong password for user {user.id}")
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not user.can_login():
            logger.warning(f"Login refused: inactive user {user.id}")
            raise AuthenticationError(ACCOUNT_INACTIVE)

        return user

    async def login_web(self, command: LoginWebCommand) -> Result[WebLoginResult]:
        """
        Login for the web client (cookie session).

        Steps: verify credentials -> check active -> delete existing sessions
        -> create and save a new session.
        """
        async with self.uow:
            try:
                user = await self._verify_credentials(command.email, command.password)

                await self.uow.sessions.delete_by_user_id(user.id)

                session = Session.create(
                    user.id,
                    ip_address=command.ip_address,
                    user_agent=command.user_agent,
                    ttl_seconds=self.config.session_ttl_seconds,
                )
                session = await self.uow.sessions.save(session)

                await self.uow.commit()
            except AppError as exc:
                return Return.err(exc.error)

            logger.info(f"Web login for user {user.id}, session {session.id}")
            return Return.ok(
                WebLoginResult(user=UserView.from_user(user), session=session)
            )

    async def login_api(self, command: LoginApiCommand) -> Result[ApiLoginResult]:
        """
        Login for the API client (JWT pair).

        Steps: verify credentials -> check active -> mint pair -> save both
        JwtToken records.
        """
        async with self.uow:
            try:
                user = await self._verify_credentials(command.email, command.password)

                token_pair, access_token, refresh_token = TokenPair.generate(
                    user.id,
                    self.config.jwt_secret,
                    self.config.access_token_ttl_seconds,
                    self.config.refresh_token_ttl_seconds,
                )
                await self.uow.tokens.save(access_token)
                await self.uow.tokens.save(refresh_token)

                await self.uow.commit()
            except AppError as exc:
                return Return.err(exc.error)

            logger.info(f"API login for user {user.id}")
            return Return.ok(
                ApiLoginResult(user=UserView.from_user(user), token_pair=token_pair)
            )
