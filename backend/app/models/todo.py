"""
Todo Labels Backend — Todo SQLAlchemy Model
============================================

What:  ORM model representing the `todos` table.
How:   Inherits from the shared DeclarativeBase; Alembic revision 001 creates it.
Who:   Queried and mutated by TodoService.

Lifecycle:
    1. Created with completed = False
    2. Text and completed flag updated through PATCH/PUT /todos/{id}
    3. Deleted explicitly, together with its todo_labels rows
"""

from sqlalchemy import Boolean, Integer, String, false
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Todo(Base):
    """A single todo item. Labels are attached through `todo_labels`."""

    __tablename__ = "todos"
    # Ids of deleted rows are never handed out again (SQLite reuses them otherwise)
    __table_args__ = {"sqlite_autoincrement": True}

    # Generated integer key; insertion order == id order, which list_todos relies on
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    text: Mapped[str] = mapped_column(String, nullable=False)

    completed: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    def __repr__(self) -> str:
        return f"<Todo(id={self.id}, completed={self.completed})>"
