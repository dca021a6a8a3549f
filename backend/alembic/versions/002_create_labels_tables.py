"""Create labels and todo_labels tables

Revision ID: 002
Revises: 001
Create Date: 2022-12-04 16:03:04.000000+00:00

What:  Creates `labels` and the `todo_labels` join table.
How:   Both foreign keys on todo_labels are DEFERRABLE INITIALLY DEFERRED,
       so they are checked at COMMIT rather than per statement. There is
       no ON DELETE CASCADE and no UNIQUE(todo_id, label_id); the services
       clean up and de-duplicate association rows themselves.

Rollback: downgrade() drops both tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "labels",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sqlite_autoincrement=True,
    )

    op.create_table(
        "todo_labels",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("todo_id", sa.Integer(), nullable=False),
        sa.Column("label_id", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["todo_id"], ["todos.id"],
            deferrable=True, initially="DEFERRED",
        ),
        sa.ForeignKeyConstraint(
            ["label_id"], ["labels.id"],
            deferrable=True, initially="DEFERRED",
        ),
        sqlite_autoincrement=True,
    )

    op.create_index("idx_todo_labels_todo_id", "todo_labels", ["todo_id"])
    op.create_index("idx_todo_labels_label_id", "todo_labels", ["label_id"])


def downgrade() -> None:
    op.drop_index("idx_todo_labels_label_id", table_name="todo_labels")
    op.drop_index("idx_todo_labels_todo_id", table_name="todo_labels")
    op.drop_table("todo_labels")
    op.drop_table("labels")
