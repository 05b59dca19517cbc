"""API endpoint tests."""

from unittest.mock import patch

from fastapi import Request
from sqlalchemy import delete
from sqlalchemy.exc import OperationalError

from todo_api.api.dependencies import CurrentUser
from todo_api.models.user import User
from todo_api.services.todos import TodoStore


def _create_todo(client, headers, title="Test todo", description=None):
    payload = {"title": title}
    if description is not None:
        payload["description"] = description
    response = client.post("/api/todos", headers=headers, json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]["todo"]


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Service is healthy",
        "data": {"status": "healthy", "environment": "test"},
    }


def test_register_user(client):
    """Test user registration."""
    response = client.post(
        "/api/auth/register",
        json={"username": "new_user", "email": "NewUser@Example.com", "password": "password123"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["token"]
    assert body["data"]["user"]["username"] == "new_user"
    assert body["data"]["user"]["email"] == "newuser@example.com"
    assert "password_hash" not in body["data"]["user"]


def test_register_validation_errors(client):
    """Test registration input is validated before anything is stored."""
    response = client.post(
        "/api/auth/register",
        json={"username": "a!", "email": "not-an-email", "password": "123"},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "VALIDATION_ERROR"
    assert len(body["errors"]) == 3


def test_register_duplicate_email(client, auth_headers):
    """Test registration with duplicate email fails."""
    response = client.post(
        "/api/auth/register",
        json={"username": "someone_else", "email": auth_headers.email, "password": "password123"},
    )
    assert response.status_code == 409
    assert response.json()["code"] == "CONFLICT"
    assert "already registered" in response.json()["message"]


def test_register_duplicate_username(client, auth_headers):
    """Test registration with duplicate username fails."""
    response = client.post(
        "/api/auth/register",
        json={
            "username": auth_headers.username,
            "email": "fresh@example.com",
            "password": "pw1234",
        },
    )
    assert response.status_code == 409
    assert response.json()["code"] == "CONFLICT"


def test_login(client, auth_headers):
    """Test user login."""
    response = client.post(
        "/api/auth/login", json={"email": auth_headers.email, "password": "testpass123"}
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["token"]
    assert data["user"]["id"] == auth_headers.user_id


def test_login_wrong_password(client, auth_headers):
    """Test login with wrong password."""
    response = client.post(
        "/api/auth/login", json={"email": auth_headers.email, "password": "wrongpass"}
    )
    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHENTICATED"
    assert response.headers["www-authenticate"] == "Bearer"


def test_register_rejects_password_over_72_bytes(client):
    for password in ("p" * 73, "é" * 40):
        response = client.post(
            "/api/auth/register",
            json={"username": "long_pw", "email": "long@example.com", "password": password},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert any("72 bytes" in error for error in body["errors"])


def test_login_with_longer_password_sharing_prefix_fails(client, register_user):
    user = register_user("prefix_user", "prefix@example.com", "p" * 72)

    response = client.post("/api/auth/login", json={"email": user.email, "password": "p" * 72})
    assert response.status_code == 200

    response = client.post(
        "/api/auth/login", json={"email": user.email, "password": "p" * 72 + "zzzz"}
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_login_unknown_email(client):
    response = client.post(
        "/api/auth/login", json={"email": "ghost@example.com", "password": "whatever"}
    )
    assert response.status_code == 401


def test_verify_token(client, auth_headers):
    """Test getting current user info from the token."""
    response = client.get("/api/auth/verify", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["user"]["email"] == auth_headers.email


def test_verify_rejects_bad_tokens(client, auth_headers):
    for headers in (
        {},
        {"Authorization": "Bearer garbage"},
        {"Authorization": f"Basic {auth_headers.token}"},
        {"Authorization": f"Bearer {auth_headers.token}x"},
    ):
        response = client.get("/api/auth/verify", headers=headers)
        assert response.status_code == 401
        body = response.json()
        assert body["code"] == "UNAUTHENTICATED"
        # The reason for rejection is not disclosed.
        assert "SIGNATURE" not in body["message"]
        assert "MALFORMED" not in body["message"]


def test_expired_token_is_rejected(client, app, auth_headers):
    tokens = app.state.token_service
    real_clock = tokens.clock
    tokens.clock = lambda: real_clock() + 24 * 60 * 60 + 1
    try:
        response = client.get("/api/todos", headers=auth_headers)
    finally:
        tokens.clock = real_clock
    assert response.status_code == 401


def test_logout(client, auth_headers):
    response = client.post("/api/auth/logout", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Logged out successfully"}


def test_gate_attaches_user_to_request(client, app, auth_headers):
    @app.get("/test/whoami")
    async def whoami(request: Request, user: CurrentUser):
        return {"state_user": request.state.user.id, "user": user.id}

    response = client.get("/test/whoami", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"state_user": auth_headers.user_id, "user": auth_headers.user_id}


def test_token_for_deleted_user_is_rejected(client, app, auth_headers):
    async def delete_user():
        async with app.state.database.session() as session:
            await session.execute(delete(User).where(User.id == auth_headers.user_id))
            await session.commit()

    client.portal.call(delete_user)

    for path in ("/api/auth/verify", "/api/todos"):
        response = client.get(path, headers=auth_headers)
        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHENTICATED"


def test_unauthorized_access(client):
    """Test that todo endpoints require authentication."""
    assert client.get("/api/todos").status_code == 401
    assert client.post("/api/todos", json={"title": "x"}).status_code == 401
    assert client.get("/api/todos/anything").status_code == 401
    assert client.put("/api/todos/anything", json={"completed": True}).status_code == 401
    assert client.delete("/api/todos/anything").status_code == 401


def test_create_todo(client, auth_headers):
    """Test creating a todo."""
    response = client.post(
        "/api/todos",
        headers=auth_headers,
        json={"title": "  Buy milk  ", "description": "Semi-skimmed"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Todo created successfully"
    todo = body["data"]["todo"]
    assert todo["title"] == "Buy milk"
    assert todo["description"] == "Semi-skimmed"
    assert todo["completed"] is False
    assert todo["user_id"] == auth_headers.user_id


def test_create_todo_validation(client, auth_headers):
    payloads = (
        {},
        {"title": ""},
        {"title": "   "},
        {"title": "x" * 101},
        {"title": "ok", "description": "d" * 501},
    )
    for payload in payloads:
        response = client.post("/api/todos", headers=auth_headers, json=payload)
        assert response.status_code == 400, payload
        assert response.json()["code"] == "VALIDATION_ERROR"


def test_get_todo(client, auth_headers):
    todo = _create_todo(client, auth_headers, "Read book")

    response = client.get(f"/api/todos/{todo['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["data"]["todo"] == todo


def test_get_unknown_todo(client, auth_headers):
    response = client.get("/api/todos/does-not-exist", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_other_users_todo_is_forbidden(client, auth_headers, other_auth_headers):
    """A todo that exists but belongs to someone else yields 403, not 404."""
    todo = _create_todo(client, auth_headers, "Mine")

    get_response = client.get(f"/api/todos/{todo['id']}", headers=other_auth_headers)
    put_response = client.put(
        f"/api/todos/{todo['id']}", headers=other_auth_headers, json={"completed": True}
    )
    delete_response = client.delete(f"/api/todos/{todo['id']}", headers=other_auth_headers)

    for response in (get_response, put_response, delete_response):
        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"

    # Untouched for the owner.
    owner_view = client.get(f"/api/todos/{todo['id']}", headers=auth_headers).json()
    assert owner_view["data"]["todo"]["completed"] is False


def test_other_user_unknown_todo_is_not_found(client, other_auth_headers):
    response = client.get("/api/todos/unknown-id", headers=other_auth_headers)
    assert response.status_code == 404


def test_update_todo_partial(client, auth_headers):
    todo = _create_todo(client, auth_headers, "Buy milk", "Two litres")

    response = client.put(
        f"/api/todos/{todo['id']}", headers=auth_headers, json={"completed": True}
    )

    assert response.status_code == 200
    updated = response.json()["data"]["todo"]
    assert updated["completed"] is True
    assert updated["title"] == todo["title"]
    assert updated["description"] == todo["description"]


def test_update_todo_clears_description(client, auth_headers):
    todo = _create_todo(client, auth_headers, "Buy milk", "Two litres")

    response = client.put(
        f"/api/todos/{todo['id']}", headers=auth_headers, json={"description": None}
    )

    assert response.status_code == 200
    assert response.json()["data"]["todo"]["description"] is None


def test_update_todo_validation(client, auth_headers):
    todo = _create_todo(client, auth_headers)

    for payload in ({"title": ""}, {"title": None}, {"completed": "yes"}, {"completed": None}):
        response = client.put(f"/api/todos/{todo['id']}", headers=auth_headers, json=payload)
        assert response.status_code == 400, payload


def test_update_unknown_todo(client, auth_headers):
    response = client.put("/api/todos/nope", headers=auth_headers, json={"title": "x"})
    assert response.status_code == 404


def test_update_of_todo_deleted_mid_request_is_not_found(client, auth_headers):
    todo = _create_todo(client, auth_headers)
    original_update = TodoStore.update

    async def delete_then_update(self, todo_id, changes):
        await self.delete(todo_id)
        return await original_update(self, todo_id, changes)

    with patch.object(TodoStore, "update", delete_then_update):
        response = client.put(
            f"/api/todos/{todo['id']}", headers=auth_headers, json={"completed": True}
        )

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_delete_todo(client, auth_headers):
    todo = _create_todo(client, auth_headers)

    response = client.delete(f"/api/todos/{todo['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["success"] is True

    assert client.get(f"/api/todos/{todo['id']}", headers=auth_headers).status_code == 404
    assert client.delete(f"/api/todos/{todo['id']}", headers=auth_headers).status_code == 404


def test_list_todos_filters_and_pagination(client, auth_headers, other_auth_headers):
    created = [_create_todo(client, auth_headers, f"Todo {i}") for i in range(10)]
    _create_todo(client, other_auth_headers, "Someone else's")
    for todo in created[:4]:
        client.put(f"/api/todos/{todo['id']}", headers=auth_headers, json={"completed": True})

    response = client.get("/api/todos", headers=auth_headers)
    data = response.json()["data"]
    assert response.status_code == 200
    assert [t["id"] for t in data["todos"]] == [t["id"] for t in reversed(created)]
    assert data["pagination"] == {"total": 10, "limit": 50, "offset": 0, "hasMore": False}

    pending = client.get("/api/todos?status=pending", headers=auth_headers).json()["data"]
    assert pending["pagination"]["total"] == 6
    assert not any(t["completed"] for t in pending["todos"])

    completed = client.get("/api/todos?status=completed", headers=auth_headers).json()["data"]
    assert completed["pagination"]["total"] == 4
    assert all(t["completed"] for t in completed["todos"])

    tail = client.get("/api/todos?limit=3&offset=9", headers=auth_headers).json()["data"]
    assert len(tail["todos"]) == 1
    assert tail["pagination"]["hasMore"] is False

    middle = client.get("/api/todos?limit=3&offset=6", headers=auth_headers).json()["data"]
    assert len(middle["todos"]) == 3
    assert middle["pagination"]["hasMore"] is True


def test_list_todos_query_validation(client, auth_headers):
    for query in ("status=done", "limit=0", "limit=101", "limit=abc", "offset=-1"):
        response = client.get(f"/api/todos?{query}", headers=auth_headers)
        assert response.status_code == 400, query
        assert response.json()["code"] == "VALIDATION_ERROR"


def test_unknown_route_uses_envelope(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.json()["success"] is False
    assert response.json()["code"] == "NOT_FOUND"


def test_storage_failure_is_internal_error(client, auth_headers):
    with patch(
        "todo_api.services.todos.TodoStore.create",
        side_effect=OperationalError("INSERT", {}, Exception("disk I/O error")),
    ):
        response = client.post("/api/todos", headers=auth_headers, json={"title": "x"})

    assert response.status_code == 500
    body = response.json()
    assert body == {"success": False, "message": "Internal server error", "code": "INTERNAL"}


def test_end_to_end(client):
    """Register, create, toggle, read back, delete."""
    register = client.post(
        "/api/auth/register",
        json={"username": "alice", "email": "a@x.com", "password": "secret1"},
    )
    assert register.status_code == 201
    headers = {"Authorization": f"Bearer {register.json()['data']['token']}"}

    created = client.post("/api/todos", headers=headers, json={"title": "Buy milk"})
    assert created.status_code == 201
    todo = created.json()["data"]["todo"]
    assert todo["completed"] is False

    toggled = client.put(f"/api/todos/{todo['id']}", headers=headers, json={"completed": True})
    assert toggled.status_code == 200

    fetched = client.get(f"/api/todos/{todo['id']}", headers=headers)
    assert fetched.json()["data"]["todo"]["completed"] is True

    assert client.delete(f"/api/todos/{todo['id']}", headers=headers).status_code == 200
    assert client.get(f"/api/todos/{todo['id']}", headers=headers).status_code == 404
