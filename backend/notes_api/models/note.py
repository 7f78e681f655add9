"""
Notes API: Note SQLAlchemy Model
==================================

What:  ORM model representing the `notes` table.
How:   Inherits from SQLAlchemy's DeclarativeBase; Alembic reads this for migrations.
Who:   Used by NoteService for CRUD statements and by the test suite to build the schema.

Table Design:
    - UUID primary key, generated on insert and never changed
    - title: unique, enforced by the store (the service only maps the violation)
    - category / published: optional, defaulted to '' / false
    - created_at / updated_at: UTC with timezone; both written from one
      timestamp on insert, updated_at refreshed on every update

    Index on created_at DESC serves the list query
    (ORDER BY created_at DESC LIMIT :limit OFFSET :offset).

    The PostgreSQL-only defaults (gen_random_uuid()) live in the migration;
    the model keeps portable column types so the same metadata also builds
    the SQLite schema used by the tests.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from notes_api.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """
    A single note row.

    Lifecycle:
        1. Inserted by create (id and timestamps assigned)
        2. Mutated in place by update (partial; updated_at refreshed)
        3. Hard-deleted by delete
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier, immutable after creation",
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Note title, unique across all notes",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Note body",
    )

    category: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        default="",
        server_default=text("''"),
        comment="Free-form category; empty string when not given",
    )

    published: Mapped[bool | None] = mapped_column(
        Boolean,
        nullable=True,
        default=False,
        server_default=text("false"),
        comment="Publication flag",
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this note was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this note was last modified (UTC)",
    )

    __table_args__ = (
        Index("idx_notes_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, created_at='{self.created_at}')>"
