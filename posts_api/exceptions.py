"""
Posts API: Custom Exception Hierarchy
=====================================

What:  Defines application-specific exceptions for the post operations.
Why:   Custom exceptions let services signal failures without knowing about
       HTTP; global handlers in main.py map them to status codes.
How:   Each exception class carries a message and optional context dict.
Who:   Raised by the validation module and PostService; caught by handlers.

Exception Hierarchy:
    PostsApiError (base)
    ├── ValidationError   → 400 Bad Request (client can fix the input)
    └── NotFoundError     → 404 Not Found

Infrastructure failures (database unreachable, driver errors) are not
wrapped; they reach the catch-all handler unmodified and become a 500.
"""

from typing import Any, Dict, List, Optional


class PostsApiError(Exception):
    """
    Base exception for all Posts API application errors.

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


class ValidationError(PostsApiError):
    """
    Raised when client input fails the post field rules.

    HTTP:    400 Bad Request

    Carries a mapping from field name to the list of violation messages for
    that field, so clients can show every problem at once.

    Example response:
        {
            "error": "validation_error",
            "message": "Invalid input",
            "errors": {"title": ["The title field is required."]},
            "request_id": "a1b2c3d4"
        }
    """

    def __init__(
        self,
        message: str = "Invalid input",
        errors: Optional[Dict[str, List[str]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        self.errors: Dict[str, List[str]] = dict(errors or {})
        if self.errors:
            ctx["fields"] = sorted(self.errors)
        super().__init__(message=message, context=ctx)


class NotFoundError(PostsApiError):
    """
    Raised when a requested resource does not exist.

    HTTP:    404 Not Found

    SQLAlchemy returns None for missing rows; the service layer converts
    None into this exception so routes stay free of lookup checks.
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
        self.resource = resource
        self.resource_id = resource_id
