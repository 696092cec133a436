"""Create pets table

Revision ID: 001
Revises: None
Create Date: 2024-06-01 00:00:00.000000+00:00

Creates the `pets` table. The schema is portable: it runs on PostgreSQL and
on SQLite.

Rollback: downgrade() drops the table (all pets are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "pets",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("age", sa.Float(), nullable=False),
        sa.Column("breed", sa.String(), nullable=False),
        sa.Column(
            "is_adopted",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        # Insertion order for list queries; not exposed by the API
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_pets_created_at", "pets", ["created_at"])
    op.create_index("idx_pets_is_adopted", "pets", ["is_adopted"])


def downgrade() -> None:
    op.drop_index("idx_pets_is_adopted", table_name="pets")
    op.drop_index("idx_pets_created_at", table_name="pets")
    op.drop_table("pets")
