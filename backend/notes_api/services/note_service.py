"""
Notes API: Note Service
=========================

What:  One method per CRUD operation, each issuing a single SQL statement.
How:   Builds SQLAlchemy 2.0 statements (insert/select/update/delete with
       RETURNING where a row is needed) and runs them on the request's
       AsyncSession. Writes are committed here, before the handler builds
       its response.
Who:   Called by route handlers; calls the database layer.

Error Translation:
    store answers no row                  → NotFoundError        (404)
    unique violation on title             → ConflictError        (409)
    statement or pool checkout timed out  → StoreUnavailableError (503)
    any other SQLAlchemyError (or commit) → DatabaseError        (500)

Design Decision:
    NoteService is stateless. It receives the db session for each call,
    so tests can hand it a mock session and each request keeps its own
    transaction.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import delete, false, func, insert, select, update
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession

from notes_api.config import settings
from notes_api.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    StoreUnavailableError,
)
from notes_api.models.note import Note, utcnow
from notes_api.schemas.note import CreateNoteSchema, FilterOptions, UpdateNoteSchema

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATEs for unique_violation and query_canceled
UNIQUE_VIOLATION = "23505"
QUERY_CANCELED = "57014"


def is_unique_violation(exc: IntegrityError) -> bool:
    """
    True when an IntegrityError comes from a UNIQUE constraint.

    asyncpg exposes the SQLSTATE on the original exception; SQLite only
    reports it in the message ("UNIQUE constraint failed: notes.title").
    """
    orig = exc.orig
    if getattr(orig, "sqlstate", None) == UNIQUE_VIOLATION:
        return True
    message = str(orig).lower()
    return "unique constraint" in message or "duplicate key" in message


def is_statement_timeout(exc: DBAPIError) -> bool:
    """True when the server cancelled a statement for exceeding statement_timeout."""
    orig = exc.orig
    if getattr(orig, "sqlstate", None) == QUERY_CANCELED:
        return True
    return "statement timeout" in str(orig).lower()


def parse_note_id(note_id: str) -> Optional[uuid.UUID]:
    """Parses a path id; None when it is not a UUID (treated as missing)."""
    try:
        return uuid.UUID(str(note_id))
    except ValueError:
        return None


class NoteService:
    """
    Data access for notes.

    Responsibilities:
        - create_note(): INSERT ... RETURNING
        - list_notes():  SELECT ... ORDER BY created_at DESC LIMIT/OFFSET
        - get_note():    SELECT ... WHERE id
        - update_note(): UPDATE ... WHERE id RETURNING (single statement)
        - delete_note(): DELETE ... WHERE id, checked by row count
    """

    async def _execute(self, db: AsyncSession, statement, operation: str):
        """
        Runs one statement.

        The statement bound (DB_STATEMENT_TIMEOUT) is enforced by the server,
        see database.engine_connect_args. A cancelled statement or a pool
        checkout timeout becomes StoreUnavailableError. Other errors
        propagate so each operation can classify them.
        """
        try:
            return await db.execute(statement)
        except PoolTimeoutError as e:
            logger.error("No pooled connection available during %s: %s", operation, str(e))
            raise StoreUnavailableError(context={"operation": operation, "reason": "pool_timeout"})
        except DBAPIError as e:
            if not is_statement_timeout(e):
                raise
            logger.error(
                "Statement exceeded %.1fs during %s",
                settings.db_statement_timeout,
                operation,
            )
            raise StoreUnavailableError(context={"operation": operation, "reason": "statement_timeout"})

    async def _commit(self, db: AsyncSession, operation: str) -> None:
        """
        Commits a write before the response is built.

        A failed commit is rolled back and reported as DatabaseError, so the
        client never sees success for a row that was not stored.
        """
        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise self._database_error(operation, e)

    def _database_error(self, operation: str, exc: Exception) -> DatabaseError:
        logger.error("Database error during %s: %s", operation, str(exc), exc_info=True)
        return DatabaseError(
            context={"operation": operation, "error_type": type(exc).__name__, "detail": str(exc)},
        )

    async def create_note(self, db: AsyncSession, body: CreateNoteSchema) -> Note:
        """
        Insert a new note and return the stored row.

        One timestamp is written to both created_at and updated_at, so a
        fresh note always has them equal.

        Raises:
            ConflictError: title already used (→ 409)
            DatabaseError: any other store failure (→ 500)
        """
        now = utcnow()
        statement = (
            insert(Note)
            .values(
                title=body.title,
                content=body.content,
                category=body.category if body.category is not None else "",
                published=body.published if body.published is not None else False,
                created_at=now,
                updated_at=now,
            )
            .returning(Note)
        )

        try:
            result = await self._execute(db, statement, "create_note")
            note = result.scalar_one()
        except IntegrityError as e:
            if is_unique_violation(e):
                logger.info("Rejected duplicate note title: %r", body.title)
                raise ConflictError(context={"title": body.title})
            raise self._database_error("create_note", e)
        except SQLAlchemyError as e:
            raise self._database_error("create_note", e)

        await self._commit(db, "create_note")
        logger.info("Note created: %s", note.id)
        return note

    async def list_notes(self, db: AsyncSession, options: FilterOptions) -> List[Note]:
        """
        One page of notes, newest first.

        Query plan:
            SELECT * FROM notes ORDER BY created_at DESC LIMIT :limit OFFSET :offset
            → walks idx_notes_created_at
        """
        statement = (
            select(Note)
            .order_by(Note.created_at.desc())
            .limit(options.limit)
            .offset(options.offset)
        )

        try:
            result = await self._execute(db, statement, "list_notes")
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise self._database_error("list_notes", e)

    async def get_note(self, db: AsyncSession, note_id: str) -> Note:
        """
        Retrieve a single note by ID.

        Raises:
            NotFoundError: no note with that id, or the id is not a UUID (→ 404)
            DatabaseError: query execution failed (→ 500)
        """
        uid = parse_note_id(note_id)
        if uid is None:
            raise NotFoundError(resource_id=note_id)

        try:
            result = await self._execute(db, select(Note).where(Note.id == uid), "get_note")
            note = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise self._database_error("get_note", e)

        if note is None:
            raise NotFoundError(resource_id=note_id)
        return note

    async def update_note(self, db: AsyncSession, note_id: str, body: UpdateNoteSchema) -> Note:
        """
        Apply a partial update in one statement and return the new row.

        Column rules:
            provided field           → written as given
            omitted title/content    → left untouched
            omitted category         → COALESCE(category, '')
            omitted published        → COALESCE(published, false)
            updated_at               → now

        The store evaluates the whole row in a single UPDATE, so there is
        no window between reading the old values and writing the new ones.
        A concurrent delete shows up as zero returned rows.

        Raises:
            NotFoundError: no row matched (→ 404)
            ConflictError: new title collides with another note (→ 409)
            DatabaseError: any other store failure (→ 500)
        """
        uid = parse_note_id(note_id)
        if uid is None:
            raise NotFoundError(resource_id=note_id)

        values = body.provided_fields()
        values.setdefault("category", func.coalesce(Note.category, ""))
        values.setdefault("published", func.coalesce(Note.published, false()))
        values["updated_at"] = utcnow()

        statement = (
            update(Note)
            .where(Note.id == uid)
            .values(**values)
            .returning(Note)
            .execution_options(synchronize_session=False)
        )

        try:
            result = await self._execute(db, statement, "update_note")
            note = result.scalar_one_or_none()
        except IntegrityError as e:
            if is_unique_violation(e):
                raise ConflictError(context={"note_id": note_id, "title": body.title})
            raise self._database_error("update_note", e)
        except SQLAlchemyError as e:
            raise self._database_error("update_note", e)

        if note is None:
            raise NotFoundError(resource_id=note_id)

        await self._commit(db, "update_note")
        logger.info("Note updated: %s (fields=%s)", note.id, sorted(body.provided_fields()))
        return note

    async def delete_note(self, db: AsyncSession, note_id: str) -> None:
        """
        Hard-delete a note.

        Succeeds only when exactly one row was removed.

        Raises:
            NotFoundError: zero rows removed (→ 404)
            DatabaseError: store failure (→ 500)
        """
        uid = parse_note_id(note_id)
        if uid is None:
            raise NotFoundError(resource_id=note_id)

        statement = (
            delete(Note)
            .where(Note.id == uid)
            .execution_options(synchronize_session=False)
        )

        try:
            result = await self._execute(db, statement, "delete_note")
        except SQLAlchemyError as e:
            raise self._database_error("delete_note", e)

        if result.rowcount == 0:
            raise NotFoundError(resource_id=note_id)

        await self._commit(db, "delete_note")
        logger.info("Note deleted: %s", uid)


# ── Singleton Instance ────────────────────────────────────────────────────
note_service = NoteService()
