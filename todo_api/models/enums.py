"""Enums for model fields."""

from enum import Enum


class TodoStatus(str, Enum):
    """Completion filter for todo listings."""

    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"

    def completed_flag(self) -> bool | None:
        """The completed value this filter selects, or None for no filter."""
        if self is TodoStatus.COMPLETED:
            return True
        if self is TodoStatus.PENDING:
            return False
        return None
