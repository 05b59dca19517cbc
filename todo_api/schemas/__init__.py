"""Pydantic schemas for API requests and responses."""

from todo_api.schemas.auth import AuthData, UserData, UserLogin, UserRegister, UserResponse
from todo_api.schemas.common import DataResponse, ErrorResponse, MessageResponse
from todo_api.schemas.todo import (
    Pagination,
    TodoCreate,
    TodoData,
    TodoListData,
    TodoResponse,
    TodoUpdate,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "AuthData",
    "UserData",
    "MessageResponse",
    "DataResponse",
    "ErrorResponse",
    "TodoCreate",
    "TodoUpdate",
    "TodoResponse",
    "TodoData",
    "TodoListData",
    "Pagination",
]
