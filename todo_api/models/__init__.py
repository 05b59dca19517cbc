"""SQLAlchemy models."""

from todo_api.models.enums import TodoStatus
from todo_api.models.todo import Todo
from todo_api.models.user import User

__all__ = [
    "User",
    "Todo",
    "TodoStatus",
]
