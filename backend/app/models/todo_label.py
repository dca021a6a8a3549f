"""
Todo Labels Backend — TodoLabel Association Model
==================================================

What:  ORM model for the `todo_labels` join table (todos ↔ labels, many-to-many).
Why a mapped class (not a bare Table): the table has its own surrogate `id`
       primary key, and services insert/delete rows directly.

Deferred Constraint Checking:
    Both foreign keys are DEFERRABLE INITIALLY DEFERRED. Inside a transaction
    the rows may reference a todo or label that does not exist yet (or any
    more); the check happens at COMMIT. This lets TodoService replace a
    todo's label set with delete-then-insert, and insert a todo together
    with its associations, without ordering the statements around the
    constraints.

    There is no ON DELETE CASCADE. Deleting a todo or label must remove the
    matching rows here in the same transaction, otherwise the commit fails.

    (todo_id, label_id) is not unique at the schema level; services
    de-duplicate label ids before inserting.
"""

from sqlalchemy import ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class TodoLabel(Base):
    __tablename__ = "todo_labels"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    todo_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("todos.id", deferrable=True, initially="DEFERRED"),
        nullable=False,
    )

    label_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("labels.id", deferrable=True, initially="DEFERRED"),
        nullable=False,
    )

    # Both lookup directions are hot: embedding labels in todos, and
    # filtering / cleaning up by label
    __table_args__ = (
        Index("idx_todo_labels_todo_id", "todo_id"),
        Index("idx_todo_labels_label_id", "label_id"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"<TodoLabel(todo_id={self.todo_id}, label_id={self.label_id})>"
