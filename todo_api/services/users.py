"""Credential store: user records and password handling."""

import logging

from fastapi.concurrency import run_in_threadpool
from passlib.context import CryptContext
from passlib.exc import PasswordSizeError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from todo_api.errors import ConflictError, ValidationError
from todo_api.models.user import User
from todo_api.schemas.auth import MAX_PASSWORD_BYTES

logger = logging.getLogger(__name__)

PASSWORD_TOO_LONG = f"password: Password must not exceed {MAX_PASSWORD_BYTES} bytes"


def _too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def build_password_context(rounds: int = 10) -> CryptContext:
    """Bcrypt context; every hash carries its own random salt.

    Bcrypt only reads the first 72 bytes of a secret, so longer secrets are
    refused instead of being silently truncated.
    """
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=rounds,
        bcrypt__truncate_error=True,
    )


class UserStore:
    """Persistence for user identities.

    Hashing and verification are CPU-bound, so they run in a worker thread to
    keep the event loop free for other requests.
    """

    def __init__(self, db: AsyncSession, pwd_context: CryptContext | None = None):
        self.db = db
        self.pwd_context = pwd_context or build_password_context()

    async def hash_password(self, password: str) -> str:
        if _too_long(password):
            raise ValidationError("Validation failed", errors=[PASSWORD_TOO_LONG])
        try:
            return await run_in_threadpool(self.pwd_context.hash, password)
        except PasswordSizeError as e:
            raise ValidationError("Validation failed", errors=[PASSWORD_TOO_LONG]) from e

    async def verify_password(self, user: User, password: str) -> bool:
        """Verify a plaintext password against the user's stored hash.

        A password longer than bcrypt can hash never matches, even if its first
        72 bytes do.
        """
        if _too_long(password):
            return False
        try:
            return await run_in_threadpool(self.pwd_context.verify, password, user.password_hash)
        except PasswordSizeError:
            # Could never have been stored, so it cannot match.
            return False

    async def find_by_id(self, user_id: str) -> User | None:
        return await self.db.get(User, user_id)

    async def find_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def find_by_username(self, username: str) -> User | None:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        return await self.find_by_email(email) is not None

    async def username_exists(self, username: str) -> bool:
        return await self.find_by_username(username) is not None

    async def create(self, username: str, email: str, password: str) -> User:
        """Create a new user, failing with ConflictError if either identity is taken."""
        email = email.lower()
        if await self.email_exists(email):
            raise ConflictError("Email already registered")
        if await self.username_exists(username):
            raise ConflictError("Username already taken")

        user = User(
            username=username,
            email=email,
            password_hash=await self.hash_password(password),
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent registration.
            await self.db.rollback()
            raise ConflictError("Username or email already registered") from e
        await self.db.refresh(user)

        logger.info("Registered user %s (%s)", user.id, user.username)
        return user

    async def authenticate(self, email: str, password: str) -> User | None:
        """Authenticate a user by email and password."""
        user = await self.find_by_email(email)
        if not user:
            return None
        if not await self.verify_password(user, password):
            return None
        return user
