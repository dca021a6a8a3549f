"""
Todo Labels Backend — Label Service
====================================

What:  Data-access operations for labels.
Who:   Called by the /labels route handlers.

Uniqueness:
    The `labels` table has no UNIQUE constraint on `name`. create_label
    checks for an existing row first and raises ConflictError. Names are
    stored without surrounding whitespace before the check. Two
    concurrent creates with the same name can both pass the check; that race
    is accepted.

Deletion:
    delete_label removes every `todo_labels` row pointing at the label and
    the label itself in one transaction, so no todo keeps a dangling label.
    Deleting an id that does not exist is a no-op.
"""

import logging
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import transaction
from app.exceptions import ConflictError, DatabaseError, TodoAppError
from app.models.label import Label
from app.models.todo_label import TodoLabel
from app.schemas.todo import LabelResponse
from app.services.validation import require_text

logger = logging.getLogger(__name__)


class LabelService:
    """Create, list and delete labels."""

    async def list_labels(self, db: AsyncSession) -> List[LabelResponse]:
        """All labels ordered by id."""
        try:
            result = await db.execute(select(Label).order_by(Label.id.asc()))
            return [LabelResponse.model_validate(label) for label in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing labels: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve labels. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

    async def create_label(self, db: AsyncSession, name: str) -> LabelResponse:
        """
        Insert a new label.

        Raises:
            ValidationError: name is empty or too long (→ 400)
            ConflictError: a label with this name already exists (→ 409)
            DatabaseError: the insert failed (→ 500)
        """
        # Stored trimmed, so "urgent" and "urgent " are the same label
        name = require_text(name, "name", "Label name", settings.label_name_max_length).strip()

        try:
            async with transaction(db):
                result = await db.execute(select(Label).where(Label.name == name).limit(1))
                existing = result.scalar_one_or_none()
                if existing is not None:
                    raise ConflictError(
                        message=f"Label '{name}' already exists",
                        context={"label_id": existing.id},
                    )

                label = Label(name=name)
                db.add(label)
                await db.flush()

            logger.info("Label created: %s (%s)", label.id, name)
            return LabelResponse.model_validate(label)

        except TodoAppError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error creating label: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the label. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

    async def delete_label(self, db: AsyncSession, label_id: int) -> None:
        """Delete a label and its associations. Absent ids are a no-op."""
        try:
            async with transaction(db):
                detached = await db.execute(
                    delete(TodoLabel).where(TodoLabel.label_id == label_id)
                )
                removed = await db.execute(delete(Label).where(Label.id == label_id))

            if removed.rowcount:
                logger.info(
                    "Label %s deleted (detached from %d todos)", label_id, detached.rowcount
                )
            else:
                logger.debug("Label %s already absent; delete is a no-op", label_id)

        except SQLAlchemyError as e:
            logger.error("Database error deleting label %s: %s", label_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the label. Please try again.",
                context={"label_id": label_id},
            ) from e


label_service = LabelService()
