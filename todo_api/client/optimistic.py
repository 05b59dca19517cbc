"""Local todo state with optimistic mutations that can be committed or rolled back."""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class MutationState(str, Enum):
    PENDING = "pending"
    COMMITTED = "committed"
    REVERTED = "reverted"


class MutationKind(str, Enum):
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class OptimisticMutation:
    """One local change awaiting the server's verdict.

    `snapshot` is the entity as it was before the change, used to roll back.
    """

    todo_id: str
    kind: MutationKind
    snapshot: dict[str, Any]
    changes: dict[str, Any] = field(default_factory=dict)
    state: MutationState = MutationState.PENDING


class InvalidTransition(Exception):
    """Raised when settling a mutation that is no longer pending."""


class UnknownTodoError(LookupError):
    """Raised when a mutation targets a todo the store does not hold."""

    def __init__(self, todo_id: str):
        super().__init__(f"Todo {todo_id} is not held locally")
        self.todo_id = todo_id


def _sort_key(todo: dict[str, Any]) -> str:
    return str(todo.get("created_at", ""))


class OptimisticStore:
    """The client's view of the user's todos, newest first.

    Mutations to the same todo are not coordinated with each other; whichever
    settles last determines the local state.
    """

    def __init__(self, todos: list[dict[str, Any]] | None = None):
        self._todos: dict[str, dict[str, Any]] = {}
        self.replace_all(todos or [])

    def replace_all(self, todos: list[dict[str, Any]]) -> None:
        self._todos = {todo["id"]: dict(todo) for todo in todos}

    def todos(self) -> list[dict[str, Any]]:
        return sorted(self._todos.values(), key=_sort_key, reverse=True)

    def get(self, todo_id: str) -> dict[str, Any] | None:
        return self._todos.get(todo_id)

    def upsert(self, todo: dict[str, Any]) -> None:
        self._todos[todo["id"]] = dict(todo)

    def begin_update(self, todo_id: str, changes: dict[str, Any]) -> OptimisticMutation:
        """Apply `changes` locally right away and return the pending mutation."""
        current = self._require(todo_id)
        mutation = OptimisticMutation(
            todo_id=todo_id,
            kind=MutationKind.UPDATE,
            snapshot=copy.deepcopy(current),
            changes=dict(changes),
        )
        current.update(changes)
        return mutation

    def begin_delete(self, todo_id: str) -> OptimisticMutation:
        """Remove a todo locally right away and return the pending mutation."""
        snapshot = self._require(todo_id)
        del self._todos[todo_id]
        return OptimisticMutation(todo_id=todo_id, kind=MutationKind.DELETE, snapshot=snapshot)

    def commit(
        self, mutation: OptimisticMutation, server_todo: dict[str, Any] | None = None
    ) -> None:
        """Accept the server's outcome; an updated record replaces the local one."""
        self._settle(mutation, MutationState.COMMITTED)
        if mutation.kind is MutationKind.UPDATE and server_todo is not None:
            self.upsert(server_todo)

    def revert(self, mutation: OptimisticMutation) -> None:
        """Restore the todo exactly as it was before the mutation began."""
        self._settle(mutation, MutationState.REVERTED)
        self._todos[mutation.todo_id] = copy.deepcopy(mutation.snapshot)

    def _require(self, todo_id: str) -> dict[str, Any]:
        try:
            return self._todos[todo_id]
        except KeyError:
            raise UnknownTodoError(todo_id) from None

    def _settle(self, mutation: OptimisticMutation, state: MutationState) -> None:
        if mutation.state is not MutationState.PENDING:
            raise InvalidTransition(
                f"Mutation for {mutation.todo_id} is already {mutation.state.value}"
            )
        mutation.state = state
