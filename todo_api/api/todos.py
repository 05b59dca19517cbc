"""Todo API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from todo_api.api.dependencies import CurrentUser, get_current_user, get_todo_store
from todo_api.errors import ForbiddenError, NotFoundError
from todo_api.models.enums import TodoStatus
from todo_api.models.todo import Todo
from todo_api.models.user import User
from todo_api.schemas.common import DataResponse, MessageResponse
from todo_api.schemas.todo import (
    Pagination,
    TodoCreate,
    TodoData,
    TodoListData,
    TodoResponse,
    TodoUpdate,
)
from todo_api.services.todos import DEFAULT_LIMIT, MAX_LIMIT, TodoStore

# Every route below sits behind the authorization gate.
router = APIRouter(
    prefix="/api/todos",
    tags=["todos"],
    dependencies=[Depends(get_current_user)],
)

Store = Annotated[TodoStore, Depends(get_todo_store)]


async def get_owned_todo(store: TodoStore, todo_id: str, user: User) -> Todo:
    """Get a todo, reporting 404 when it is missing and 403 when it is someone else's."""
    todo = await store.find_by_id(todo_id)
    if not todo:
        raise NotFoundError("Todo not found")

    if not todo.belongs_to(user.id):
        raise ForbiddenError("Access denied. This todo does not belong to you")

    return todo


def _todo_data(todo: Todo) -> TodoData:
    return TodoData(todo=TodoResponse.model_validate(todo))


@router.get("", response_model=DataResponse[TodoListData])
async def list_todos(
    current_user: CurrentUser,
    store: Store,
    status_filter: Annotated[TodoStatus, Query(alias="status")] = TodoStatus.ALL,
    limit: Annotated[int, Query(ge=1, le=MAX_LIMIT)] = DEFAULT_LIMIT,
    offset: Annotated[int, Query(ge=0)] = 0,
):
    """Get the current user's todos, newest first."""
    page = await store.list_by_owner(current_user.id, status_filter, limit, offset)

    return DataResponse[TodoListData](
        message="Todos retrieved successfully",
        data=TodoListData(
            todos=[TodoResponse.model_validate(todo) for todo in page.todos],
            pagination=Pagination(
                total=page.total,
                limit=page.limit,
                offset=page.offset,
                has_more=page.has_more,
            ),
        ),
    )


@router.post("", response_model=DataResponse[TodoData], status_code=status.HTTP_201_CREATED)
async def create_todo(todo_data: TodoCreate, current_user: CurrentUser, store: Store):
    """Create a new todo owned by the current user."""
    todo = await store.create(current_user.id, todo_data.title, todo_data.description)
    return DataResponse[TodoData](message="Todo created successfully", data=_todo_data(todo))


@router.get("/{todo_id}", response_model=DataResponse[TodoData])
async def get_todo(todo_id: str, current_user: CurrentUser, store: Store):
    """Get a specific todo."""
    todo = await get_owned_todo(store, todo_id, current_user)
    return DataResponse[TodoData](message="Todo retrieved successfully", data=_todo_data(todo))


@router.put("/{todo_id}", response_model=DataResponse[TodoData])
async def update_todo(
    todo_id: str,
    todo_data: TodoUpdate,
    current_user: CurrentUser,
    store: Store,
):
    """Update the supplied fields of a todo."""
    todo = await get_owned_todo(store, todo_id, current_user)

    updated = await store.update(todo.id, todo_data.changes())
    if updated is None:
        # Deleted between the ownership check and the update.
        raise NotFoundError("Todo not found")

    return DataResponse[TodoData](message="Todo updated successfully", data=_todo_data(updated))


@router.delete("/{todo_id}", response_model=MessageResponse)
async def delete_todo(todo_id: str, current_user: CurrentUser, store: Store):
    """Delete a todo."""
    todo = await get_owned_todo(store, todo_id, current_user)

    if not await store.delete(todo.id):
        raise NotFoundError("Todo not found")

    return MessageResponse(message="Todo deleted successfully")
