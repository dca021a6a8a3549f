"""
Todo Labels Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the data-access and API layers.
Why:   Services raise typed errors; global handlers in main.py turn them into
       structured JSON responses with the right HTTP status code.
How:   Each exception carries a user-safe message and an optional context
       dict (logged, and for client errors returned as `details`).

Exception Hierarchy:
    TodoAppError (base)
    ├── ValidationError   → 400 Bad Request (empty/malformed input)
    ├── NotFoundError     → 404 Not Found (referenced id absent)
    ├── ConflictError     → 409 Conflict (duplicate label name)
    └── DatabaseError     → 500 Internal Server Error (unexpected data-layer failure)
"""

from typing import Any, Dict, Optional


class TodoAppError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TodoAppError):
    """
    Raised when client input fails a business rule.

    Examples: empty todo text, label name over the length limit, label ids
    that do not exist.

    HTTP: 400 Bad Request. Schema-level problems (wrong JSON types) are
    rejected earlier by FastAPI with 422.
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


class NotFoundError(TodoAppError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; services convert that into
    this exception so the handler can answer 404.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(TodoAppError):
    """
    Raised when a write would duplicate an existing resource.

    Label names carry no UNIQUE constraint in the schema; uniqueness is
    checked by LabelService before inserting.

    HTTP: 409 Conflict
    """

    def __init__(
        self,
        message: str = "The resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(TodoAppError):
    """
    Raised when a database operation fails unexpectedly.

    When: connection lost, deferred constraint violated at commit, deadlock.
    HTTP: 500 Internal Server Error. The message returned to the client is
    always generic; the context is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
