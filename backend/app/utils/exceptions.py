"""Custom exceptions and error handling utilities."""
from typing import Optional

from fastapi import status
from sqlalchemy.exc import IntegrityError

from app.config import Settings


class AppException(Exception):
    """Base exception for application errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "InternalError"
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class UnauthorizedError(AppException):
    """Raised when no usable session is present."""
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"
    default_message = "Please login first"


class TokenExpiredError(AppException):
    """Raised when the provider token behind a session has expired."""
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "TokenExpired"
    default_message = "Your LinkedIn session has expired, please login again"


class ForbiddenError(AppException):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Forbidden"
    default_message = "Access denied"


class NotFoundError(AppException):
    """Raised when a resource is not found."""
    status_code = status.HTTP_404_NOT_FOUND
    error = "NotFound"
    default_message = "Resource not found"


class DuplicateNameError(AppException):
    """Raised when an owner already has a website with the requested name."""
    status_code = status.HTTP_409_CONFLICT
    error = "DuplicateName"
    default_message = "A website with this name already exists"


class GenerationInProgressError(AppException):
    status_code = status.HTTP_409_CONFLICT
    error = "GenerationInProgress"
    default_message = "A website is already being generated for this account"


class InvalidInputError(AppException):
    """Raised when validation fails."""
    status_code = status.HTTP_400_BAD_REQUEST
    error = "InvalidInput"
    default_message = "Invalid input"


class StateMismatchError(InvalidInputError):
    error = "StateMismatch"
    default_message = "Invalid state parameter"


class InvalidProfileError(InvalidInputError):
    error = "InvalidProfile"
    default_message = "LinkedIn profile is missing required fields"


class UpstreamError(AppException):
    """Raised when the identity provider or text generation service fails."""
    error = "UpstreamFailure"
    default_message = "An upstream service failed"


class RenderFailedError(AppException):
    error = "RenderFailure"
    default_message = "Failed to render website thumbnail"


def not_found_error(resource: str, identifier: Optional[str] = None) -> NotFoundError:
    """
    Create a standardized 404 error.

    Args:
        resource: Name of the resource (e.g., "Website", "User")
        identifier: Optional identifier that was not found

    Returns:
        NotFoundError with a readable message
    """
    message = f"{resource} not found"
    if identifier:
        message += f": {identifier}"
    return NotFoundError(message)


def internal_error(settings: Settings, operation: str, error: Exception) -> AppException:
    """
    Create a 500 error whose message is generic in production.

    Args:
        settings: Application settings (deployment mode)
        operation: Description of the operation that failed
        error: The underlying exception

    Returns:
        AppException with 500 status
    """
    if settings.is_production:
        return AppException(f"Failed to {operation}")
    return AppException(f"Failed to {operation}: {error}")


UNIQUE_NAME_CONSTRAINT = "uq_websites_owner_name"


def is_duplicate_name_violation(error: IntegrityError) -> bool:
    """True if an IntegrityError came from the per-owner website name constraint."""
    orig = getattr(error, "orig", None)
    diag = getattr(orig, "diag", None)
    # psycopg2 reports the constraint by name
    constraint = getattr(diag, "constraint_name", None)
    if constraint:
        return constraint == UNIQUE_NAME_CONSTRAINT
    message = str(orig if orig is not None else error)
    if UNIQUE_NAME_CONSTRAINT in message:
        return True
    # SQLite names the columns instead
    return "UNIQUE constraint failed" in message and "websites.name" in message


def handle_database_error(error: Exception, operation: str, settings: Settings) -> AppException:
    """
    Convert database errors to application errors.

    Args:
        error: The database error
        operation: Description of the operation that failed
        settings: Application settings

    Returns:
        DuplicateNameError for website name clashes, otherwise a 500
    """
    if isinstance(error, IntegrityError) and is_duplicate_name_violation(error):
        return DuplicateNameError()
    return internal_error(settings, operation, error)
