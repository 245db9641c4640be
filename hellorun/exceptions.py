"""
Custom Exception Classes for helloRun

This module defines the exceptions raised by the blog services. Every
exception carries an HTTP status code and a machine-readable error code so
the exception handlers can render a consistent error response.
"""

from typing import Any

from fastapi import status


class HelloRunError(Exception):
    """Base exception class for all helloRun exceptions"""

    error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# ============================================================================
# Authentication & Authorization Exceptions
# ============================================================================


class AuthenticationRequired(HelloRunError):
    """Raised when no verified user is attached to the request"""

    error_code = "AUTH_REQUIRED"

    def __init__(self, message: str = "Authentication required."):
        super().__init__(message=message, status_code=status.HTTP_401_UNAUTHORIZED)


class AuthorizationError(HelloRunError):
    """Raised when user lacks permission for an action"""

    error_code = "AUTH_PERMISSION_DENIED"

    def __init__(
        self, message: str = "You do not have permission to perform this action", required_role: str | None = None
    ):
        details = {"required_role": required_role} if required_role else {}
        super().__init__(message=message, status_code=status.HTTP_403_FORBIDDEN, details=details)


# ============================================================================
# Resource Not Found Exceptions
# ============================================================================


class NotFound(HelloRunError):
    """Base class for resource not found errors"""

    error_code = "RESOURCE_NOT_FOUND"

    def __init__(self, resource_type: str, resource_id: Any | None = None):
        message = f"{resource_type} not found"
        if resource_id is not None:
            message = f"{resource_type} with id '{resource_id}' not found"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class PostNotFoundError(NotFound):
    """Raised when a blog post is missing, soft-deleted or owned by someone else"""

    error_code = "RESOURCE_POST_NOT_FOUND"

    def __init__(self, post_id: Any | None = None):
        super().__init__(resource_type="Post", resource_id=post_id)


# ============================================================================
# Validation & Business Logic Exceptions
# ============================================================================


class ValidationFailed(HelloRunError):
    """Raised when a blog payload breaks one or more validation rules"""

    error_code = "VALIDATION_FAILED"

    def __init__(self, errors: list[str], message: str = "Validation failed."):
        self.errors = list(errors)
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, details={"errors": self.errors})


class StateConflict(HelloRunError):
    """Raised when a post's current status does not allow the requested action"""

    error_code = "STATE_CONFLICT"

    def __init__(self, current_status: str, action: str, message: str | None = None):
        self.current_status = current_status
        self.action = action
        super().__init__(
            message=message or f"Cannot {action} a post from \"{current_status}\" status.",
            status_code=status.HTTP_409_CONFLICT,
            details={"current_status": current_status, "action": action},
        )


# ============================================================================
# Storage Exceptions
# ============================================================================


class StorageFailure(HelloRunError):
    """Raised when the database or the object store fails"""

    error_code = "STORAGE_FAILURE"

    def __init__(self, message: str = "A storage error occurred", operation: str | None = None):
        details = {"operation": operation} if operation else {}
        super().__init__(message=message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, details=details)


class UploadRejected(HelloRunError):
    """Raised when an uploaded cover image is not acceptable"""

    error_code = "UPLOAD_REJECTED"

    def __init__(self, message: str = "File upload failed", filename: str | None = None):
        details = {"filename": filename} if filename else {}
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, details=details)
