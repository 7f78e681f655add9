"""
Notes API: Notes Route Handlers
=================================

What:  The five note endpoints under /api/notes.
How:   Extracts path/query/body, delegates to NoteService, wraps the result
       in the success envelope. Errors propagate as application exceptions.
Who:   Called by the frontend and by curl.
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from notes_api.config import settings
from notes_api.database import get_db_session
from notes_api.schemas.note import (
    CreateNoteSchema,
    ErrorResponse,
    FilterOptions,
    NoteListResponse,
    NoteResponse,
    NoteSingleResponse,
    UpdateNoteSchema,
)
from notes_api.services.note_service import note_service

logger = logging.getLogger(__name__)

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/api", tags=["Notes"])


def get_filter_options(
    page: int = Query(default=1, description="1-based page number (values below 1 are treated as 1)"),
    limit: int = Query(
        default=settings.list_default_limit,
        description=f"Items per page (clamped to 1..{settings.list_max_limit})",
    ),
) -> FilterOptions:
    return FilterOptions(page=page, limit=limit)


@router.post(
    "/notes",
    status_code=status.HTTP_201_CREATED,
    response_model=NoteSingleResponse,
    responses={
        409: {"description": "A note with that title already exists", "model": ErrorResponse},
        422: {"description": "Malformed body", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a note",
)
async def create_note(
    body: CreateNoteSchema,
    db: AsyncSession = Depends(get_db_session),
) -> NoteSingleResponse:
    note = await note_service.create_note(db=db, body=body)
    return NoteSingleResponse.wrap(note)


@router.get(
    "/notes",
    response_model=NoteListResponse,
    responses={
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List notes, newest first",
    description="Offset/limit paging: offset = (page - 1) * limit, ordered by created_at descending.",
)
async def list_notes(
    options: FilterOptions = Depends(get_filter_options),
    db: AsyncSession = Depends(get_db_session),
) -> NoteListResponse:
    notes = await note_service.list_notes(db=db, options=options)
    return NoteListResponse(
        results=len(notes),
        notes=[NoteResponse.model_validate(note) for note in notes],
    )


@router.get(
    "/notes/{note_id}",
    response_model=NoteSingleResponse,
    responses={
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single note by ID",
)
async def get_note(
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> NoteSingleResponse:
    """
    Args:
        note_id: Path parameter. Kept as a string so that a malformed id is
                 answered with 404, the same as an unknown one.
    """
    note = await note_service.get_note(db=db, note_id=note_id)
    return NoteSingleResponse.wrap(note)


@router.patch(
    "/notes/{note_id}",
    response_model=NoteSingleResponse,
    responses={
        404: {"description": "Note not found", "model": ErrorResponse},
        409: {"description": "Title collides with another note", "model": ErrorResponse},
        422: {"description": "Malformed body", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Partially update a note",
    description="Fields that are omitted (or null) keep their stored value.",
)
async def edit_note(
    note_id: str,
    body: UpdateNoteSchema,
    db: AsyncSession = Depends(get_db_session),
) -> NoteSingleResponse:
    note = await note_service.update_note(db=db, note_id=note_id, body=body)
    return NoteSingleResponse.wrap(note)


@router.delete(
    "/notes/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await note_service.delete_note(db=db, note_id=note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
