"""Async HTTP client for the todo API."""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A failed API call; status 0 means the server was never reached."""

    def __init__(
        self,
        message: str,
        status: int,
        code: str | None = None,
        errors: list[str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.errors = errors or []

    def is_auth_error(self) -> bool:
        return self.status in (401, 403)

    def is_validation_error(self) -> bool:
        return self.status == 400

    def is_server_error(self) -> bool:
        return self.status >= 500

    def is_network_error(self) -> bool:
        return self.status == 0


class TokenStore:
    """Holds the bearer token for the current client session."""

    def __init__(self, token: str | None = None):
        self.token = token

    def set(self, token: str | None) -> None:
        self.token = token

    def clear(self) -> None:
        self.token = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)


class TodoApiClient:
    """Thin wrapper over the REST endpoints that unwraps response envelopes."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000/api",
        tokens: TokenStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        self.tokens = tokens or TokenStore()
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "TodoApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        """Send a request and return the decoded envelope, raising ApiError on failure."""
        headers = kwargs.pop("headers", {})
        if self.tokens.token:
            headers["Authorization"] = f"Bearer {self.tokens.token}"

        try:
            response = await self._http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("Request %s %s failed: %s", method, path, e)
            raise ApiError("Network error. Please check your connection.", 0) from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_error:
            raise ApiError(
                body.get("message") or "Request failed",
                response.status_code,
                code=body.get("code"),
                errors=body.get("errors"),
            )
        return body

    # Authentication

    async def register(self, username: str, email: str, password: str) -> dict[str, Any]:
        body = await self.request(
            "POST",
            "/auth/register",
            json={"username": username, "email": email, "password": password},
        )
        self.tokens.set(body["data"]["token"])
        return body["data"]["user"]

    async def login(self, email: str, password: str) -> dict[str, Any]:
        body = await self.request(
            "POST", "/auth/login", json={"email": email, "password": password}
        )
        self.tokens.set(body["data"]["token"])
        return body["data"]["user"]

    async def verify(self) -> dict[str, Any]:
        body = await self.request("GET", "/auth/verify")
        return body["data"]["user"]

    async def logout(self) -> None:
        """Tell the server, then drop the token whatever the outcome."""
        try:
            await self.request("POST", "/auth/logout")
        finally:
            self.tokens.clear()

    # Todos

    async def list_todos(
        self, status: str = "all", limit: int = 50, offset: int = 0
    ) -> dict[str, Any]:
        body = await self.request(
            "GET", "/todos", params={"status": status, "limit": limit, "offset": offset}
        )
        return body["data"]

    async def create_todo(self, title: str, description: str | None = None) -> dict[str, Any]:
        payload: dict[str, Any] = {"title": title}
        if description:
            payload["description"] = description
        body = await self.request("POST", "/todos", json=payload)
        return body["data"]["todo"]

    async def get_todo(self, todo_id: str) -> dict[str, Any]:
        body = await self.request("GET", f"/todos/{todo_id}")
        return body["data"]["todo"]

    async def update_todo(self, todo_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        body = await self.request("PUT", f"/todos/{todo_id}", json=changes)
        return body["data"]["todo"]

    async def toggle_todo(self, todo_id: str, completed: bool) -> dict[str, Any]:
        return await self.update_todo(todo_id, {"completed": completed})

    async def delete_todo(self, todo_id: str) -> None:
        await self.request("DELETE", f"/todos/{todo_id}")
