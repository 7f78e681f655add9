"""
Notes API: Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions for the failure kinds a request can hit.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return the JSON error envelope with the matching HTTP status code.
Who:   Raised by the note service; caught by global handlers.

Exception Hierarchy:
    NotesAPIError (base)
    ├── NotFoundError          → 404 Not Found          (status "fail")
    ├── ConflictError          → 409 Conflict           (status "fail")
    ├── DatabaseError          → 500 Internal Error     (status "error")
    ├── StoreUnavailableError  → 503 Service Unavailable (status "error")
    └── StartupError           → process exits (raised from the lifespan)

Expected conditions (not found, conflict) and infrastructure failures
(database, timeouts) are separate types so handlers can decide what the
client is allowed to see.
"""

from typing import Any, Dict, Optional


class NotesAPIError(Exception):
    """
    Base exception for all Notes API errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(NotesAPIError):
    """
    Raised when a note id matches no row.

    When:    GET/PATCH/DELETE /api/notes/{id} with an unknown or malformed id,
             or an update/delete that affected zero rows.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource_id: str,
        resource: str = "Note",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} with ID: {resource_id} not found", context=ctx)
        self.resource_id = resource_id


class ConflictError(NotesAPIError):
    """
    Raised when the store rejects a write on the title uniqueness constraint.

    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "Note with that title already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(NotesAPIError):
    """
    Raised when database operations fail unexpectedly.

    What:    A query, insert, update or delete failed for a reason other than
             a known constraint (connection lost, deadlock, bad SQL, ...).
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Driver detail
    goes into `context` and is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreUnavailableError(NotesAPIError):
    """
    Raised when a statement exceeds its timeout or no pooled connection
    frees up in time.

    HTTP:    503 Service Unavailable, with a Retry-After header
    """

    def __init__(
        self,
        message: str = "The database is temporarily unavailable. Please retry shortly.",
        retry_after: int = 5,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class StartupError(NotesAPIError):
    """Raised from the lifespan when the store cannot be reached at boot."""
