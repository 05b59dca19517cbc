"""Todo list screen logic: loads, filters and mutates todos through the API."""

import logging
from typing import Any

from todo_api.client.api import ApiError, TodoApiClient
from todo_api.client.notifications import BannerQueue
from todo_api.client.optimistic import OptimisticStore

logger = logging.getLogger(__name__)

FILTERS = ("all", "completed", "pending")


class TodoListController:
    """Keeps the local todo list in step with the server.

    Toggles and deletes of todos held locally are applied first and rolled back
    if the server rejects them; edits wait for the server's copy. Failures
    surface as error banners; an authentication failure also drops the held
    token so the router sends the user back to login.
    """

    def __init__(
        self,
        api: TodoApiClient,
        store: OptimisticStore | None = None,
        banners: BannerQueue | None = None,
    ):
        self.api = api
        self.store = store or OptimisticStore()
        self.banners = banners or BannerQueue()
        self.filter = "all"

    def set_filter(self, name: str) -> None:
        if name not in FILTERS:
            raise ValueError(f"Unknown filter: {name}")
        self.filter = name

    def visible_todos(self) -> list[dict[str, Any]]:
        todos = self.store.todos()
        if self.filter == "completed":
            return [todo for todo in todos if todo["completed"]]
        if self.filter == "pending":
            return [todo for todo in todos if not todo["completed"]]
        return todos

    def stats(self) -> dict[str, int]:
        todos = self.store.todos()
        completed = sum(1 for todo in todos if todo["completed"])
        return {"total": len(todos), "completed": completed, "pending": len(todos) - completed}

    async def load(self) -> bool:
        try:
            data = await self.api.list_todos(limit=100)
        except ApiError as e:
            self._report(e, "Failed to load todos.")
            return False
        self.store.replace_all(data["todos"])
        return True

    async def create(self, title: str, description: str | None = None) -> dict[str, Any] | None:
        try:
            todo = await self.api.create_todo(title, description)
        except ApiError as e:
            self._report(e, "Failed to create todo.")
            return None
        self.store.upsert(todo)
        self.banners.success("Todo created successfully!")
        return todo

    async def edit(
        self, todo_id: str, title: str, description: str | None = None
    ) -> dict[str, Any] | None:
        try:
            todo = await self.api.update_todo(
                todo_id, {"title": title, "description": description or None}
            )
        except ApiError as e:
            self._report(e, "Failed to update todo.")
            return None
        self.store.upsert(todo)
        self.banners.success("Todo updated successfully!")
        return todo

    async def toggle(self, todo_id: str, completed: bool) -> bool:
        mutation = None
        if self.store.get(todo_id) is not None:
            mutation = self.store.begin_update(todo_id, {"completed": completed})
        try:
            todo = await self.api.toggle_todo(todo_id, completed)
        except ApiError as e:
            if mutation is not None:
                self.store.revert(mutation)
            self._report(e, "Failed to update todo. Please try again.")
            return False
        if mutation is not None:
            self.store.commit(mutation, todo)
        else:
            self.store.upsert(todo)
        return True

    async def delete(self, todo_id: str) -> bool:
        mutation = None
        if self.store.get(todo_id) is not None:
            mutation = self.store.begin_delete(todo_id)
        try:
            await self.api.delete_todo(todo_id)
        except ApiError as e:
            if mutation is not None:
                self.store.revert(mutation)
            self._report(e, "Failed to delete todo. Please try again.")
            return False
        if mutation is not None:
            self.store.commit(mutation)
        self.banners.success("Todo deleted successfully!")
        return True

    def _report(self, error: ApiError, fallback: str) -> None:
        logger.warning("API call failed (%s): %s", error.status, error.message)
        if error.status == 401:
            self.api.tokens.clear()
            self.banners.error("Your session has expired. Please log in again.")
        elif error.is_network_error() or error.is_server_error():
            self.banners.error(fallback)
        else:
            self.banners.error(error.message or fallback)
