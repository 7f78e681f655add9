"""
Notes API: Pydantic Request/Response Schemas
==============================================

What:  Pydantic models defining the API contract.
How:   FastAPI uses these models to validate request bodies and query strings,
       serialize responses, and generate the OpenAPI document.
Who:   Used by route handlers (input and output) and NoteService (output).

Every JSON body is wrapped in an envelope:
    success → {"status": "success", ...}
    failure → {"status": "fail" | "error", "message": "..."}
"""

import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from notes_api.config import settings

# OFFSET is bound as a signed 64-bit integer by both PostgreSQL and SQLite.
MAX_OFFSET = 2**63 - 1

# ══════════════════════════════════════════════════════════════════════════
# Request Models: What the client sends
# ══════════════════════════════════════════════════════════════════════════


class CreateNoteSchema(BaseModel):
    """
    Body of POST /api/notes.

    title and content are required. category falls back to "" and
    published to false when absent or null.
    """
    title: str = Field(min_length=1, max_length=255, description="Unique note title")
    content: str = Field(min_length=1, description="Note body")
    category: Optional[str] = Field(default=None, max_length=100, description="Optional category")
    published: Optional[bool] = Field(default=None, description="Publication flag (default false)")


class UpdateNoteSchema(BaseModel):
    """
    Body of PATCH /api/notes/{id}.

    Every field is optional. A field that is absent or null keeps its
    stored value.
    """
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, max_length=100)
    published: Optional[bool] = Field(default=None)

    def provided_fields(self) -> dict:
        """Fields the client actually set to a value."""
        return self.model_dump(exclude_none=True)


# ══════════════════════════════════════════════════════════════════════════
# Query Parameter Models: What the client sends in URL params
# ══════════════════════════════════════════════════════════════════════════


class FilterOptions(BaseModel):
    """
    Validated paging parameters for GET /api/notes.

    Out-of-range values are clamped rather than rejected:
        page  < 1               → 1
        limit < 1               → 1
        limit > LIST_MAX_LIMIT  → LIST_MAX_LIMIT
        offset > MAX_OFFSET     → MAX_OFFSET (an empty page)
    """
    page: int = Field(default=1, description="1-based page number")
    limit: int = Field(default=settings.list_default_limit, description="Items per page")

    @field_validator("page")
    @classmethod
    def clamp_page(cls, v: int) -> int:
        return max(v, 1)

    @field_validator("limit")
    @classmethod
    def clamp_limit(cls, v: int) -> int:
        return min(max(v, 1), settings.list_max_limit)

    @property
    def offset(self) -> int:
        return min((self.page - 1) * self.limit, MAX_OFFSET)


# ══════════════════════════════════════════════════════════════════════════
# Response Models: What the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """Full representation of a stored note."""
    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    title: str
    content: str
    category: Optional[str] = None
    published: Optional[bool] = None
    created_at: datetime = Field(description="When the note was created (UTC ISO 8601)")
    updated_at: datetime = Field(description="When the note was last modified (UTC ISO 8601)")

    model_config = {"from_attributes": True}


class NoteData(BaseModel):
    note: NoteResponse


class NoteSingleResponse(BaseModel):
    """Envelope returned by create, get and update."""
    status: Literal["success"] = "success"
    data: NoteData

    @classmethod
    def wrap(cls, note) -> "NoteSingleResponse":
        return cls(data=NoteData(note=NoteResponse.model_validate(note)))


class NoteListResponse(BaseModel):
    """
    Envelope returned by GET /api/notes.

    results is the number of notes in this page, not the table size.
    """
    status: Literal["success"] = "success"
    results: int = Field(description="Number of notes returned")
    notes: List[NoteResponse]


class HealthCheckerResponse(BaseModel):
    """Static liveness payload."""
    status: Literal["success"] = "success"
    message: str


class HealthResponse(BaseModel):
    """
    Readiness payload returned by GET /health.

    status is "healthy" when the store answers a probe, "unhealthy" otherwise.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


# ══════════════════════════════════════════════════════════════════════════
# Error Response Model: consistent error format across all endpoints
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error body.

    Example:
        {
            "status": "fail",
            "message": "Note with ID: 7d1c... not found",
            "request_id": "a1b2c3d4"
        }
    """
    status: Literal["fail", "error"] = Field(
        description='"fail" for expected conditions, "error" for unexpected failures'
    )
    message: str = Field(description="Human-readable error description")
    details: Optional[list] = Field(default=None, description="Field-level validation errors")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")
