"""
Custom exception classes for the application.

Every exception carries the HTTP status it is rendered with, so handlers
and services can raise them without knowing how the response is built.
"""

from typing import Any


class AppException(Exception):
    """
    Base exception class for all application exceptions.

    Attributes:
        message: Human-readable error message, returned as `Message`.
        http_status: HTTP status code for REST API responses.
    """

    http_status: int = 500

    def __init__(self, message: str):
        """
        Initialize the exception with a message.

        Args:
            message: Human-readable error description.
        """
        self.message = message
        super().__init__(message)


class ValidationError(AppException):
    """
    Request was rejected before reaching the services.

    Covers malformed bodies, unexpected field sets, unparseable ids and
    referential failures reported back by a service.

    HTTP Status: 400 Bad Request
    """

    http_status = 400


class RequestValidationFailed(ValidationError):
    """
    Field-level validation of a request body failed.

    HTTP Status: 400 Bad Request
    """

    def __init__(self, errors: list[dict[str, Any]], message: str = "Validation failed."):
        """
        Args:
            errors: Items of the form {"PropertyName": ..., "ErrorMessage": ...}.
            message: Summary message.
        """
        super().__init__(message)
        self.errors = errors


class NotFoundError(AppException):
    """
    Resource not found.

    HTTP Status: 404 Not Found
    """

    http_status = 404


class TransactionError(AppException):
    """
    Unit of work was used out of order (e.g. a second BeginTransaction).

    HTTP Status: 500 Internal Server Error
    """

    http_status = 500
