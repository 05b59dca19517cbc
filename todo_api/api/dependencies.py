"""FastAPI dependencies for authentication and database."""

import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from todo_api.database import get_db
from todo_api.errors import UnauthenticatedError
from todo_api.models.user import User
from todo_api.services.todos import TodoStore
from todo_api.services.tokens import TokenError, TokenService
from todo_api.services.users import UserStore

logger = logging.getLogger(__name__)

# auto_error is off so a missing header produces our own envelope.
security = HTTPBearer(auto_error=False)


def get_token_service(request: Request) -> TokenService:
    """Get the process-wide token service created at startup."""
    return request.app.state.token_service


def get_user_store(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserStore:
    """Get user store bound to the request's session."""
    return UserStore(db, request.app.state.pwd_context)


def get_todo_store(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TodoStore:
    """Get todo store bound to the request's session."""
    return TodoStore(db)


async def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    users: Annotated[UserStore, Depends(get_user_store)],
) -> User:
    """Get the current authenticated user from the bearer token."""
    if credentials is None:
        raise UnauthenticatedError("Access token required")

    try:
        claims = tokens.verify(credentials.credentials)
    except TokenError as e:
        logger.info("Rejected token: %s", e.reason.value)
        raise UnauthenticatedError("Invalid or expired token") from e

    user = await users.find_by_id(claims.user_id)
    if user is None:
        logger.info("Rejected token for unknown user %s", claims.user_id)
        raise UnauthenticatedError("Invalid or expired token")

    request.state.user = user
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
