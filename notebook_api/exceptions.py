"""
Notebook API - Custom Exception Hierarchy
=========================================

What:  Application-specific exceptions for the three failure classes the
       mapper can report.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) translate them into
       structured JSON error responses with the matching HTTP status code.
Who:   Raised by NotebookService and the request-body handler.

Exception Hierarchy:
    NotebookAPIError (base)        → 500 Internal Server Error
    ├── ValidationError            → 400 Bad Request (malformed id or body)
    ├── NotFoundError              → 404 Not Found (no matching document)
    └── DatabaseError              → 500 Internal Server Error (store failure)
"""

from typing import Any, Dict, Optional


class NotebookAPIError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  Error description returned in the API response
        context:  Additional debug info, returned as `details` where safe
    """

    error_code = "internal_error"
    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotebookAPIError):
    """
    Raised when client input fails validation.

    When:    Malformed notebook or note identifier in the path, undecodable
             or ill-typed JSON body, duplicate note identifier.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Invalid notebook ID format",
            "details": {"field": "notebookID", "value": "xyz"}
        }
    """

    error_code = "validation_error"
    status_code = 400

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


class NotFoundError(NotebookAPIError):
    """
    Raised when a requested document does not exist.

    When:    Unknown notebook id, or a compound (notebook, note) key that
             matches no document even though both ids are well-formed.
    HTTP:    404 Not Found
    """

    error_code = "not_found"
    status_code = 404

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


class DatabaseError(NotebookAPIError):
    """
    Raised when a store operation fails for any reason not classified above.

    The message is the underlying store error text; there is no retry and
    no partial-success reporting.
    HTTP:    500 Internal Server Error
    """

    error_code = "store_error"
    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
