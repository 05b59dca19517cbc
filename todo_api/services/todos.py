"""Todo store: owner-scoped persistence for todo items."""

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from todo_api.errors import ValidationError
from todo_api.models.enums import TodoStatus
from todo_api.models.mixins import utc_now
from todo_api.models.todo import Todo

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50
MAX_LIMIT = 100
UPDATABLE_FIELDS = ("title", "description", "completed")


@dataclass
class TodoPage:
    """One page of a user's todos plus the size of the whole filtered set."""

    todos: list[Todo]
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        return self.offset + self.limit < self.total


def _apply_status(statement, status: TodoStatus):
    completed = TodoStatus(status).completed_flag()
    if completed is not None:
        statement = statement.where(Todo.completed.is_(completed))
    return statement


class TodoStore:
    """Persistence for todos.

    Ownership is not enforced here. Callers compare ``todo.user_id`` against the
    authenticated user so that a missing todo and someone else's todo can be
    reported differently.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, owner_id: str, title: str, description: str | None = None) -> Todo:
        now = utc_now()
        todo = Todo(
            user_id=owner_id,
            title=title,
            description=description,
            completed=False,
            created_at=now,
            updated_at=now,
        )
        self.db.add(todo)
        await self.db.commit()
        await self.db.refresh(todo)
        logger.debug("Created todo %s for user %s", todo.id, owner_id)
        return todo

    async def find_by_id(self, todo_id: str) -> Todo | None:
        return await self.db.get(Todo, todo_id)

    async def list_by_owner(
        self,
        owner_id: str,
        status: TodoStatus = TodoStatus.ALL,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
    ) -> TodoPage:
        """List a user's todos, newest first, with the total for the same filter."""
        if not 1 <= limit <= MAX_LIMIT:
            raise ValidationError(f"Limit must be a number between 1 and {MAX_LIMIT}")
        if offset < 0:
            raise ValidationError("Offset must be a non-negative number")

        statement = _apply_status(select(Todo).where(Todo.user_id == owner_id), status)
        statement = statement.order_by(Todo.created_at.desc(), Todo.id.desc())
        result = await self.db.execute(statement.limit(limit).offset(offset))
        todos = list(result.scalars().all())

        total = await self.count_by_owner(owner_id, status)
        return TodoPage(todos=todos, total=total, limit=limit, offset=offset)

    async def count_by_owner(self, owner_id: str, status: TodoStatus = TodoStatus.ALL) -> int:
        statement = _apply_status(
            select(func.count()).select_from(Todo).where(Todo.user_id == owner_id), status
        )
        result = await self.db.execute(statement)
        return result.scalar_one()

    async def update(self, todo_id: str, changes: dict[str, Any]) -> Todo | None:
        """Apply a partial update; keys that are not supplied keep their values.

        Returns None when the todo no longer exists, including when it was
        deleted after the caller loaded it.
        """
        applied = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS}
        if not applied:
            return await self.db.get(Todo, todo_id, populate_existing=True)

        statement = (
            update(Todo)
            .where(Todo.id == todo_id)
            .values(**applied, updated_at=utc_now())
            .returning(Todo)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(statement)
        todo = result.scalar_one_or_none()
        await self.db.commit()
        return todo

    async def delete(self, todo_id: str) -> bool:
        """Delete a todo; returns False when there was nothing to delete."""
        result = await self.db.execute(delete(Todo).where(Todo.id == todo_id))
        await self.db.commit()
        deleted = result.rowcount > 0
        if deleted:
            logger.debug("Deleted todo %s", todo_id)
        return deleted
