"""Hash-route table for the client with a single authentication gate."""

from dataclasses import dataclass
from enum import Enum


class Capability(str, Enum):
    """What a route requires of the session before it can be shown."""

    PUBLIC = "public"
    REQUIRES_AUTH = "requires-auth"
    REQUIRES_ANONYMOUS = "requires-anonymous"


@dataclass(frozen=True)
class Route:
    name: str
    path: str
    capability: Capability


LOGIN = Route("login", "/login", Capability.REQUIRES_ANONYMOUS)
REGISTER = Route("register", "/register", Capability.REQUIRES_ANONYMOUS)
TODOS = Route("todos", "/todos", Capability.REQUIRES_AUTH)

ROUTES: dict[str, Route] = {route.path: route for route in (LOGIN, REGISTER, TODOS)}


def normalize_path(path: str) -> str:
    """Turn '#/todos', 'todos' or '' into a route path."""
    path = path.lstrip("#").strip()
    if not path or path == "/":
        return "/"
    return path if path.startswith("/") else f"/{path}"


def home_route(authenticated: bool) -> Route:
    return TODOS if authenticated else LOGIN


def resolve_route(path: str, authenticated: bool) -> Route:
    """Decide which route a navigation to `path` actually lands on.

    Unknown paths fall back to the home route for the session, protected routes
    redirect anonymous users to login, and anonymous-only routes send signed-in
    users to their todos.
    """
    route = ROUTES.get(normalize_path(path))
    if route is None:
        return home_route(authenticated)

    if route.capability is Capability.REQUIRES_AUTH and not authenticated:
        return LOGIN
    if route.capability is Capability.REQUIRES_ANONYMOUS and authenticated:
        return TODOS
    return route
