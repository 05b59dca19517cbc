"""Todo schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class TodoCreate(BaseModel):
    """Create a new todo."""

    title: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)

    strip_text = field_validator("title", "description", mode="before")(_strip)


class TodoUpdate(BaseModel):
    """Partially update a todo; fields left out are not touched."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    completed: bool | None = Field(None, strict=True)

    strip_text = field_validator("title", "description", mode="before")(_strip)

    @field_validator("title", "completed")
    @classmethod
    def reject_null(cls, value):
        # Only runs for values the client actually sent.
        if value is None:
            raise ValueError("must not be null")
        return value

    def changes(self) -> dict:
        """Fields explicitly supplied by the client."""
        return self.model_dump(exclude_unset=True)


class TodoResponse(BaseModel):
    """Todo response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    description: str | None
    completed: bool
    created_at: datetime
    updated_at: datetime


class TodoData(BaseModel):
    """Payload wrapping a single todo."""

    todo: TodoResponse


class Pagination(BaseModel):
    """Pagination metadata for todo listings."""

    model_config = ConfigDict(populate_by_name=True)

    total: int
    limit: int
    offset: int
    has_more: bool = Field(..., alias="hasMore")


class TodoListData(BaseModel):
    """Payload of the todo listing response."""

    todos: list[TodoResponse]
    pagination: Pagination
