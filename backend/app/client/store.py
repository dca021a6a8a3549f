"""
Todo Labels Client — State Container
=====================================

What:  Client-side source of truth for the displayed todo and label lists.
Who:   Drives a UI (or a test) through TodoApiClient.

Refetch-after-mutation:
    Every mutating action is followed by a full re-fetch of the affected
    list(s) instead of patching local state. The displayed lists therefore
    always match the server after a round trip, at the cost of one extra
    request per mutation. Label mutations re-fetch todos too, because
    deleting a label changes the labels embedded in todos.

    ┌──────────┐    ┌──────────────┐    ┌────────────────┐
    │  Action  │───▶│  Mutation    │───▶│  GET list(s)   │───▶ state replaced
    └──────────┘    │  (POST/...)  │    │                │
                    └──────────────┘    └────────────────┘

Label filter:
    select_label() only changes `selected_label_id`; `visible_todos` filters
    the already-fetched list. No request is made.

Edit buffer:
    begin_edit() copies a todo's text and label ids into an EditBuffer. The
    buffer is edited locally (toggle_label) and discarded on commit_edit()
    or cancel_edit().

Errors:
    A failed call leaves the lists untouched, stores a StoreError on
    `error` for display, and re-raises the ApiError. The next successful
    action clears `error`.
"""

import logging
from typing import Awaitable, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, Field

from app.client.api import ApiError, TodoApiClient
from app.schemas.todo import LabelResponse, TodoResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StoreError(BaseModel):
    """User-facing description of the last failed action."""
    action: str
    message: str
    status_code: int
    request_id: Optional[str] = None


class EditBuffer(BaseModel):
    """Transient draft of a todo being edited."""
    todo_id: int
    text: str
    label_ids: List[int] = Field(default_factory=list)

    def toggle_label(self, label_id: int) -> None:
        """Remove the label if selected, otherwise append it."""
        if label_id in self.label_ids:
            self.label_ids = [lid for lid in self.label_ids if lid != label_id]
        else:
            self.label_ids = [*self.label_ids, label_id]


class TodoStore:
    """In-memory todo/label state kept in sync with the backend by re-fetching."""

    def __init__(self, api: TodoApiClient):
        self.api = api
        self.todos: List[TodoResponse] = []
        self.labels: List[LabelResponse] = []
        self.selected_label_id: Optional[int] = None
        self.editing: Optional[EditBuffer] = None
        self.error: Optional[StoreError] = None

    # ── Derived state ─────────────────────────────────────────────────────

    @property
    def visible_todos(self) -> List[TodoResponse]:
        if self.selected_label_id is None:
            return list(self.todos)
        return [
            todo for todo in self.todos
            if any(label.id == self.selected_label_id for label in todo.labels)
        ]

    def select_label(self, label_id: Optional[int]) -> None:
        """Set (or clear with None) the client-side label filter."""
        self.selected_label_id = label_id

    def find_todo(self, todo_id: int) -> Optional[TodoResponse]:
        return next((todo for todo in self.todos if todo.id == todo_id), None)

    # ── Fetching ──────────────────────────────────────────────────────────

    async def load(self) -> None:
        """Initial fetch of both lists."""
        await self._run("load", self._refetch(todos=True, labels=True))

    async def _refetch(self, todos: bool = False, labels: bool = False) -> None:
        if todos:
            self.todos = await self.api.list_todos()
        if labels:
            self.labels = await self.api.list_labels()

    # ── Todo actions ──────────────────────────────────────────────────────

    async def add_todo(self, text: str, label_ids: Sequence[int] = ()) -> Optional[TodoResponse]:
        """Create a todo. Blank text is ignored without a request."""
        if not text or not text.strip():
            return None
        return await self._run("add_todo", self._add_todo(text, label_ids))

    async def _add_todo(self, text: str, label_ids: Sequence[int]) -> TodoResponse:
        created = await self.api.create_todo(text, labels=label_ids)
        await self._refetch(todos=True)
        return created

    async def update_todo(
        self,
        todo_id: int,
        text: Optional[str] = None,
        completed: Optional[bool] = None,
        label_ids: Optional[Sequence[int]] = None,
    ) -> TodoResponse:
        return await self._run(
            "update_todo", self._update_todo(todo_id, text, completed, label_ids)
        )

    async def _update_todo(self, todo_id, text, completed, label_ids) -> TodoResponse:
        updated = await self.api.update_todo(
            todo_id, text=text, completed=completed, labels=label_ids
        )
        await self._refetch(todos=True)
        return updated

    async def toggle_completed(self, todo_id: int) -> TodoResponse:
        todo = self.find_todo(todo_id)
        if todo is None:
            raise KeyError(f"todo {todo_id} is not loaded")
        return await self.update_todo(todo_id, completed=not todo.completed)

    async def delete_todo(self, todo_id: int) -> None:
        await self._run("delete_todo", self._delete_todo(todo_id))

    async def _delete_todo(self, todo_id: int) -> None:
        await self.api.delete_todo(todo_id)
        if self.editing is not None and self.editing.todo_id == todo_id:
            self.editing = None
        await self._refetch(todos=True)

    # ── Label actions ─────────────────────────────────────────────────────

    async def add_label(self, name: str) -> LabelResponse:
        return await self._run("add_label", self._add_label(name))

    async def _add_label(self, name: str) -> LabelResponse:
        created = await self.api.create_label(name)
        await self._refetch(todos=True, labels=True)
        return created

    async def delete_label(self, label_id: int) -> None:
        await self._run("delete_label", self._delete_label(label_id))

    async def _delete_label(self, label_id: int) -> None:
        await self.api.delete_label(label_id)
        if self.selected_label_id == label_id:
            self.selected_label_id = None
        await self._refetch(todos=True, labels=True)

    # ── Edit buffer ───────────────────────────────────────────────────────

    def begin_edit(self, todo_id: int) -> EditBuffer:
        todo = self.find_todo(todo_id)
        if todo is None:
            raise KeyError(f"todo {todo_id} is not loaded")
        self.editing = EditBuffer(
            todo_id=todo.id,
            text=todo.text,
            label_ids=[label.id for label in todo.labels],
        )
        return self.editing

    def cancel_edit(self) -> None:
        self.editing = None

    async def commit_edit(self) -> Optional[TodoResponse]:
        """
        Submit the edit buffer and discard it.

        The buffer is dropped even when the request fails; the error is
        reported through `error` like any other action.
        """
        buffer, self.editing = self.editing, None
        if buffer is None:
            return None
        return await self.update_todo(
            buffer.todo_id, text=buffer.text, label_ids=buffer.label_ids
        )

    # ── Error capture ─────────────────────────────────────────────────────

    async def _run(self, action: str, call: Awaitable[T]) -> T:
        self.error = None
        try:
            return await call
        except ApiError as e:
            self.error = StoreError(
                action=action,
                message=e.message,
                status_code=e.status_code,
                request_id=e.request_id,
            )
            logger.warning("Store action %s failed: %s", action, e.message)
            raise
