"""Create notes table

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Creates the `notes` table.
How:   PostgreSQL UUID primary key generated by gen_random_uuid() (PostgreSQL 13+),
       unique title, TIMESTAMP WITH TIME ZONE timestamps defaulting to now.

Rollback: downgrade() drops the table entirely (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "notes",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
            comment="Unique identifier, immutable after creation",
        ),
        sa.Column(
            "title",
            sa.String(255),
            nullable=False,
            comment="Note title, unique across all notes",
        ),
        sa.Column(
            "content",
            sa.Text(),
            nullable=False,
            comment="Note body",
        ),
        sa.Column(
            "category",
            sa.String(100),
            nullable=True,
            server_default=sa.text("''"),
            comment="Free-form category; empty string when not given",
        ),
        sa.Column(
            "published",
            sa.Boolean(),
            nullable=True,
            server_default=sa.text("false"),
            comment="Publication flag",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this note was created (UTC)",
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this note was last modified (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("title", name="notes_title_key"),
    )

    op.create_index(
        "idx_notes_created_at",
        "notes",
        [sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_notes_created_at", table_name="notes")
    op.drop_table("notes")
