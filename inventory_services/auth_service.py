"""
inventory_services.auth_service -- Mock token authentication.

Responsibility:
    Issues and stores opaque mock tokens for known usernames.  Any known
    username is accepted with the configured mock password; there is no
    real credential check and no real token format.

Architecture position:
    Services layer.  Reads users through an injected lookup (normally the
    store's current ``users``) and never touches the store otherwise.

Invariants enforced:
    - Storage is written only after the simulated latency completes, so a
      cancelled ``login`` or ``refresh_token`` leaves the session as it was.
    - ``is_authenticated`` is True iff a token is stored.

Failure modes:
    - ``InvalidCredentialsError`` on unknown username or wrong password.
    - ``NotAuthenticatedError`` from ``refresh_token`` without a session.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, Iterable
from uuid import uuid4

from inventory_config.schema import ServiceSettings
from inventory_kernel.domain.models import User
from inventory_kernel.exceptions import InvalidCredentialsError, NotAuthenticatedError
from inventory_kernel.logging_config import get_logger

logger = get_logger("services.auth")

TOKEN_KEY = "auth_token"
REFRESH_TOKEN_KEY = "refresh_token"
USER_KEY = "auth_user"


class TokenStorage:
    """In-memory key/value storage for the current session."""

    def __init__(self) -> None:
        self._items: dict[str, object] = {}

    def get(self, key: str) -> object | None:
        return self._items.get(key)

    def set(self, key: str, value: object) -> None:
        self._items[key] = value

    def remove(self, key: str) -> None:
        self._items.pop(key, None)


@dataclass(frozen=True)
class AuthSession:
    user: User
    token: str
    refresh_token: str


def _random_suffix() -> str:
    return str(uuid4())


class AuthService:
    """
    Async mock authentication.

    Contract:
        ``users`` is called on every login so newly created users can log
        in without rebuilding the service.
    """

    def __init__(
        self,
        users: Callable[[], Iterable[User]],
        settings: ServiceSettings | None = None,
        storage: TokenStorage | None = None,
        token_suffix: Callable[[], str] = _random_suffix,
    ):
        self._users = users
        self._settings = settings or ServiceSettings()
        self._storage = storage or TokenStorage()
        self._token_suffix = token_suffix

    async def login(self, username: str, password: str) -> AuthSession:
        await asyncio.sleep(self._settings.login_latency_ms / 1000)

        user = next((u for u in self._users() if u.username == username), None)
        if user is None or password != self._settings.mock_password:
            logger.warning("login_failed", extra={"username": username})
            raise InvalidCredentialsError(username)

        session = AuthSession(
            user=user,
            token=self._settings.token_prefix + self._token_suffix(),
            refresh_token=self._settings.refresh_token_prefix + self._token_suffix(),
        )
        self._storage.set(TOKEN_KEY, session.token)
        self._storage.set(REFRESH_TOKEN_KEY, session.refresh_token)
        self._storage.set(USER_KEY, user)
        logger.info("login_succeeded", extra={"user_id": user.id, "username": username})
        return session

    def logout(self) -> None:
        user = self.current_user()
        for key in (TOKEN_KEY, REFRESH_TOKEN_KEY, USER_KEY):
            self._storage.remove(key)
        if user is not None:
            logger.info("logout", extra={"user_id": user.id})

    def current_user(self) -> User | None:
        user = self._storage.get(USER_KEY)
        return user if isinstance(user, User) else None

    def token(self) -> str | None:
        token = self._storage.get(TOKEN_KEY)
        return token if isinstance(token, str) else None

    async def refresh_token(self) -> str:
        if not self.is_authenticated():
            raise NotAuthenticatedError("refresh_token")
        await asyncio.sleep(self._settings.refresh_latency_ms / 1000)
        new_token = self._settings.token_prefix + self._token_suffix()
        self._storage.set(TOKEN_KEY, new_token)
        logger.debug("token_refreshed")
        return new_token

    def is_authenticated(self) -> bool:
        return bool(self._storage.get(TOKEN_KEY))
