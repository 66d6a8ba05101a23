"""
RootNote Backend — Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for the three failure kinds the plant
       API distinguishes.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the right status code.
Who:   Raised by the plant store and route handlers; caught by main.py.

Exception Hierarchy:
    RootNoteError (base)
    ├── ValidationError   → 400 Bad Request (client can fix)
    ├── NotFoundError     → 404 Not Found
    └── StorageError      → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class RootNoteError(Exception):
    """
    Base exception for all RootNote application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; only returned for 4xx errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(RootNoteError):
    """
    Raised when client input fails validation.

    When:    Missing or blank commonName, empty partial update, unknown field,
             attempt to change a plant's id.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "commonName is required and cannot be empty",
            "details": {"field": "commonName"}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(RootNoteError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PATCH/DELETE /api/plants/{id} with an id that has no row.
    HTTP:    404 Not Found

    The store returns None (lookups) or a NOT_FOUND outcome (mutations);
    this exception is how that absence reaches the HTTP layer.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StorageError(RootNoteError):
    """
    Raised when the underlying database fails.

    When:    Database file unreadable, disk full, locked past the driver
             timeout, store used before open() or after close().
    HTTP:    500 Internal Server Error

    The client only ever sees a generic message. The original exception
    type is kept in `context` and logged server-side.
    """

    def __init__(
        self,
        message: str = "A storage error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
