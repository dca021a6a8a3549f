"""
Todo Labels Backend — Todo Service (Data-access Layer)
=======================================================

What:  All reads and writes of todos and their label associations.
Who:   Called by the /todos route handlers.
How:   Async SQLAlchemy against `todos`, `labels` and `todo_labels`; every
       multi-statement write runs inside `database.transaction()`.

Label-set replacement (update_todo with labels):
    ┌──────────────┐    ┌──────────────────────┐    ┌───────────────────┐
    │ check labels │───▶│ DELETE todo_labels   │───▶│ INSERT todo_labels│───▶ COMMIT
    │ exist        │    │ WHERE todo_id = :id  │    │ (new set)         │    (FKs checked)
    └──────────────┘    └──────────────────────┘    └───────────────────┘

    All three steps share one transaction. The foreign keys on todo_labels
    are deferred, so the intermediate state is never checked; a reader in
    another transaction sees either the old set or the new one.

Reads:
    Todos are returned in insertion order (primary key ascending). Labels
    are loaded with a second query over the join table and folded into each
    todo, ordered by label id, with repeated label ids collapsed.

Deletes are idempotent: removing an absent todo is a no-op.
"""

import logging
from typing import Dict, List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import transaction
from app.exceptions import (
    DatabaseError,
    NotFoundError,
    TodoAppError,
    ValidationError,
)
from app.models.label import Label
from app.models.todo import Todo
from app.models.todo_label import TodoLabel
from app.schemas.todo import LabelResponse, TodoResponse
from app.services.validation import require_text, unique_ids

logger = logging.getLogger(__name__)


class TodoService:
    """
    Business logic layer for todo operations.

    Error Handling Strategy:
        Validation and lookup failures raise ValidationError / NotFoundError
        before anything is written. SQLAlchemy failures (including deferred
        constraint violations at commit) roll back and are wrapped in
        DatabaseError.
    """

    # ── Reads ─────────────────────────────────────────────────────────────

    async def list_todos(
        self,
        db: AsyncSession,
        label_id: Optional[int] = None,
    ) -> List[TodoResponse]:
        """
        List todos with their labels embedded.

        Args:
            db: Async database session
            label_id: When given, only todos associated with this label

        Returns:
            Todos ordered by id ascending. An unknown label_id yields [].
        """
        try:
            query = select(Todo).order_by(Todo.id.asc())
            if label_id is not None:
                labelled = select(TodoLabel.todo_id).where(TodoLabel.label_id == label_id)
                query = query.where(Todo.id.in_(labelled))

            result = await db.execute(query)
            todos = list(result.scalars().all())
            labels = await self._load_labels(db, [todo.id for todo in todos])

            return [self._to_response(todo, labels.get(todo.id, [])) for todo in todos]

        except SQLAlchemyError as e:
            logger.error("Database error listing todos: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve todos. Please try again.",
                context={"error_type": type(e).__name__, "label_id": label_id},
            ) from e

    async def get_todo(self, db: AsyncSession, todo_id: int) -> TodoResponse:
        """
        Retrieve a single todo by id.

        Raises:
            NotFoundError: no todo with this id (→ 404)
            DatabaseError: query failed (→ 500)
        """
        try:
            todo = await self._find(db, todo_id)
            labels = await self._load_labels(db, [todo.id])
            return self._to_response(todo, labels.get(todo.id, []))

        except TodoAppError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error fetching todo %s: %s", todo_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the todo. Please try again.",
                context={"todo_id": todo_id},
            ) from e

    # ── Writes ────────────────────────────────────────────────────────────

    async def create_todo(
        self,
        db: AsyncSession,
        text: str,
        label_ids: Optional[Sequence[int]] = None,
    ) -> TodoResponse:
        """
        Insert a todo (completed = False) and its initial labels in one transaction.

        Raises:
            ValidationError: text empty/too long, or unknown label ids (→ 400)
            DatabaseError: insert or commit failed (→ 500)
        """
        text = require_text(text, "text", "Todo text", settings.todo_text_max_length)

        try:
            async with transaction(db):
                wanted = await self._existing_label_ids(db, label_ids or [])

                todo = Todo(text=text, completed=False)
                db.add(todo)
                await db.flush()  # assigns todo.id

                db.add_all(TodoLabel(todo_id=todo.id, label_id=lid) for lid in wanted)

            logger.info("Todo created: %s with %d labels", todo.id, len(wanted))
            return await self.get_todo(db, todo.id)

        except TodoAppError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error creating todo: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the todo. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

    async def update_todo(
        self,
        db: AsyncSession,
        todo_id: int,
        text: Optional[str] = None,
        completed: Optional[bool] = None,
        label_ids: Optional[Sequence[int]] = None,
    ) -> TodoResponse:
        """
        Partially update a todo.

        Args:
            text: New text, or None to keep
            completed: New flag, or None to keep
            label_ids: Full replacement label set, or None to keep the
                       current associations. [] removes all labels.

        Raises:
            NotFoundError: no todo with this id (→ 404)
            ValidationError: bad text or unknown label ids (→ 400)
            DatabaseError: write or commit failed (→ 500)
        """
        if text is not None:
            text = require_text(text, "text", "Todo text", settings.todo_text_max_length)

        try:
            async with transaction(db):
                todo = await self._find(db, todo_id)

                if text is not None:
                    todo.text = text
                if completed is not None:
                    todo.completed = completed

                if label_ids is not None:
                    wanted = await self._existing_label_ids(db, label_ids)
                    await db.execute(delete(TodoLabel).where(TodoLabel.todo_id == todo_id))
                    db.add_all(TodoLabel(todo_id=todo_id, label_id=lid) for lid in wanted)
                    logger.debug("Todo %s label set replaced with %s", todo_id, wanted)

            logger.info("Todo updated: %s", todo_id)
            return await self.get_todo(db, todo_id)

        except TodoAppError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error updating todo %s: %s", todo_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the todo. Please try again.",
                context={"todo_id": todo_id, "error_type": type(e).__name__},
            ) from e

    async def delete_todo(self, db: AsyncSession, todo_id: int) -> None:
        """Delete a todo and its associations atomically. Absent ids are a no-op."""
        try:
            async with transaction(db):
                await db.execute(delete(TodoLabel).where(TodoLabel.todo_id == todo_id))
                removed = await db.execute(delete(Todo).where(Todo.id == todo_id))

            if removed.rowcount:
                logger.info("Todo deleted: %s", todo_id)
            else:
                logger.debug("Todo %s already absent; delete is a no-op", todo_id)

        except SQLAlchemyError as e:
            logger.error("Database error deleting todo %s: %s", todo_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the todo. Please try again.",
                context={"todo_id": todo_id},
            ) from e

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _find(self, db: AsyncSession, todo_id: int) -> Todo:
        result = await db.execute(select(Todo).where(Todo.id == todo_id))
        todo = result.scalar_one_or_none()
        if todo is None:
            raise NotFoundError(resource="todo", resource_id=todo_id)
        return todo

    async def _existing_label_ids(self, db: AsyncSession, label_ids: Sequence[int]) -> List[int]:
        """
        De-duplicate `label_ids` and check that every label exists.

        Checking up front turns a bad id into a 400 instead of a deferred
        foreign key failure at commit.
        """
        wanted = unique_ids(label_ids)
        if not wanted:
            return []

        result = await db.execute(select(Label.id).where(Label.id.in_(wanted)))
        found = set(result.scalars().all())
        missing = [lid for lid in wanted if lid not in found]
        if missing:
            raise ValidationError(
                message=f"Unknown label ids: {missing}",
                field="labels",
                context={"missing_label_ids": missing},
            )
        return wanted

    async def _load_labels(
        self, db: AsyncSession, todo_ids: List[int]
    ) -> Dict[int, List[LabelResponse]]:
        """Map todo id → labels, ordered by label id, repeated rows collapsed."""
        if not todo_ids:
            return {}

        result = await db.execute(
            select(TodoLabel.todo_id, Label.id, Label.name)
            .join(Label, Label.id == TodoLabel.label_id)
            .where(TodoLabel.todo_id.in_(todo_ids))
            .order_by(TodoLabel.todo_id, Label.id)
        )

        labels: Dict[int, List[LabelResponse]] = {}
        for todo_id, label_id, name in result.all():
            bucket = labels.setdefault(todo_id, [])
            if bucket and bucket[-1].id == label_id:
                continue
            bucket.append(LabelResponse(id=label_id, name=name))
        return labels

    @staticmethod
    def _to_response(todo: Todo, labels: List[LabelResponse]) -> TodoResponse:
        return TodoResponse(
            id=todo.id,
            text=todo.text,
            completed=todo.completed,
            labels=labels,
        )


todo_service = TodoService()
