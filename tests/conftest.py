"""Pytest configuration and fixtures."""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from todo_api.config import Settings
from todo_api.database import Database
from todo_api.main import create_app
from todo_api.services.users import build_password_context

TEST_SECRET = "test-secret-key"  # noqa: S105


class AuthHeaders(dict):
    """Dict subclass that also stores the registered user's details."""

    def __init__(self, *args, user_id: str, username: str, email: str, token: str, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.username = username
        self.email = email
        self.token = token


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway SQLite database."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        environment="test",
        log_level="WARNING",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    """Create a test client; entering it runs the startup that opens the database."""
    with TestClient(app) as test_client:
        yield test_client


def _register(client, username: str, email: str, password: str = "secret1") -> AuthHeaders:
    response = client.post(
        "/api/auth/register",
        json={"username": username, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    data = response.json()["data"]
    return AuthHeaders(
        {"Authorization": f"Bearer {data['token']}"},
        user_id=data["user"]["id"],
        username=username,
        email=email,
        token=data["token"],
    )


@pytest.fixture
def register_user(client):
    """Register users on demand: register_user(username, email, password)."""

    def register(username: str, email: str, password: str = "secret1") -> AuthHeaders:
        return _register(client, username, email, password)

    return register


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    return _register(client, "test_user", "test@example.com", "testpass123")


@pytest.fixture
def other_auth_headers(client):
    """A second, unrelated user."""
    return _register(client, "other_user", "other@example.com", "otherpass123")


@pytest_asyncio.fixture
async def database(tmp_path):
    """Standalone storage handle for store-level tests."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def session(database):
    async with database.session() as db_session:
        yield db_session


@pytest.fixture
def pwd_context():
    return build_password_context(rounds=4)
