"""Client-side login state: who is signed in and whether their token still works."""

import logging
from typing import Any

from todo_api.client.api import ApiError, TodoApiClient

logger = logging.getLogger(__name__)


class ClientSession:
    """Tracks the signed-in user around a `TodoApiClient`.

    The token itself lives in the client's `TokenStore`; this class keeps the
    user record that goes with it and drops both when the server rejects them.
    """

    def __init__(self, api: TodoApiClient):
        self.api = api
        self.user: dict[str, Any] | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.api.tokens.is_authenticated

    async def restore(self) -> bool:
        """Check a previously stored token with the server at startup.

        A rejected token is cleared. A network or server failure keeps it so the
        next attempt can try again.
        """
        if not self.api.tokens.is_authenticated:
            return False

        try:
            self.user = await self.api.verify()
        except ApiError as e:
            logger.warning("Token verification failed (%s): %s", e.status, e.message)
            self.user = None
            if e.is_auth_error():
                self.api.tokens.clear()
            return False
        return True

    async def login(self, email: str, password: str) -> dict[str, Any]:
        self.user = await self.api.login(email, password)
        return self.user

    async def register(self, username: str, email: str, password: str) -> dict[str, Any]:
        self.user = await self.api.register(username, email, password)
        return self.user

    async def logout(self) -> None:
        """Sign out; local state is cleared even if the server call fails."""
        try:
            await self.api.logout()
        finally:
            self.user = None
