"""Authentication API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from todo_api.api.dependencies import CurrentUser, get_token_service, get_user_store
from todo_api.errors import UnauthenticatedError
from todo_api.schemas.auth import AuthData, UserData, UserLogin, UserRegister, UserResponse
from todo_api.schemas.common import DataResponse, MessageResponse
from todo_api.services.tokens import TokenService
from todo_api.services.users import UserStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=DataResponse[AuthData],
    status_code=status.HTTP_201_CREATED,
)
async def register(
    user_data: UserRegister,
    users: Annotated[UserStore, Depends(get_user_store)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
):
    """Register a new user."""
    user = await users.create(user_data.username, user_data.email, user_data.password)

    return DataResponse[AuthData](
        message="User registered successfully",
        data=AuthData(user=UserResponse.model_validate(user), token=tokens.issue(user.id)),
    )


@router.post("/login", response_model=DataResponse[AuthData])
async def login(
    credentials: UserLogin,
    users: Annotated[UserStore, Depends(get_user_store)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
):
    """Login with email and password."""
    user = await users.authenticate(credentials.email, credentials.password)

    if not user:
        logger.info("Failed login for %s", credentials.email)
        raise UnauthenticatedError("Invalid email or password")

    return DataResponse[AuthData](
        message="Login successful",
        data=AuthData(user=UserResponse.model_validate(user), token=tokens.issue(user.id)),
    )


@router.get("/verify", response_model=DataResponse[UserData])
async def verify(current_user: CurrentUser):
    """Check the presented token and return its user."""
    return DataResponse[UserData](
        message="Token is valid",
        data=UserData(user=UserResponse.model_validate(current_user)),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(current_user: CurrentUser):
    """Logout (client should discard token)."""
    return MessageResponse(message="Logged out successfully")
