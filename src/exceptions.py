"""
Custom exception classes for the Bookkeeper Finance API.

This module defines a hierarchy of custom exceptions that map to HTTP status codes
and provide consistent error responses across the API.

Exception hierarchy:
    AppException (base, 500)
    ├── AuthenticationError (401)
    │   ├── InvalidCredentialsError
    │   └── InvalidTokenError
    ├── AuthorizationError (403)
    │   ├── InactiveUserError
    │   └── InsufficientPermissionsError
    ├── NotFoundError (404)
    └── BusinessRuleError (400)
        ├── DuplicateNameError
        ├── DuplicateEmailError
        ├── HasDependentsError
        ├── InvalidReferenceError
        ├── IncorrectPasswordError
        └── WeakPasswordError
"""

from typing import Any


class AppException(Exception):
    """
    Base exception class for all application exceptions.

    All custom exceptions should inherit from this class to ensure
    consistent error handling and response formatting.

    Attributes:
        status_code: HTTP status code for the error
        error_code: Machine-readable error code
        message: Human-readable error message
        details: Optional additional error details
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize application exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code (default: 500)
            error_code: Machine-readable error code
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for JSON response.

        Returns:
            Dictionary with error information
        """
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
            }
        }


# =============================================================================
# Authentication Errors (401 Unauthorized)
# =============================================================================


class AuthenticationError(AppException):
    """Base class for authentication errors."""

    def __init__(
        self,
        message: str = "Authentication failed",
        error_code: str = "AUTHENTICATION_FAILED",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=401,
            error_code=error_code,
            details=details,
        )


class InvalidCredentialsError(AuthenticationError):
    """Raised when login credentials are invalid."""

    def __init__(
        self,
        message: str = "Invalid email or password",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="INVALID_CREDENTIALS",
            details=details,
        )


class InvalidTokenError(AuthenticationError):
    """
    Raised when a session token cannot be trusted.

    Covers expired, malformed and badly signed tokens alike.
    """

    def __init__(
        self,
        message: str = "Invalid or expired token",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="INVALID_TOKEN",
            details=details,
        )


# =============================================================================
# Authorization Errors (403 Forbidden)
# =============================================================================


class AuthorizationError(AppException):
    """Base class for authorization errors."""

    def __init__(
        self,
        message: str = "Access denied",
        error_code: str = "FORBIDDEN",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=403,
            error_code=error_code,
            details=details,
        )


class InactiveUserError(AuthorizationError):
    """Raised when a deactivated user presents a valid token."""

    def __init__(
        self,
        message: str = "Account is inactive. Please contact support.",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="INACTIVE_USER",
            details=details,
        )


class InsufficientPermissionsError(AuthorizationError):
    """Raised when a non-admin user calls an admin-only operation."""

    def __init__(
        self,
        message: str = "Administrator privileges required",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="INSUFFICIENT_PERMISSIONS",
            details=details,
        )


# =============================================================================
# Lookup Errors (404 Not Found)
# =============================================================================


class NotFoundError(AppException):
    """
    Raised when a requested resource is not found.

    Owner-scoped lookups raise this for rows that exist but belong to
    someone else, so ids of other users cannot be enumerated.
    """

    def __init__(
        self,
        resource: str = "Resource",
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        if message is None:
            message = f"{resource} not found"
        super().__init__(
            message=message,
            status_code=404,
            error_code="NOT_FOUND",
            details=details,
        )


# =============================================================================
# Business Rule Errors (400 Bad Request)
# =============================================================================


class BusinessRuleError(AppException):
    """Base class for rejected write operations."""

    def __init__(
        self,
        message: str,
        error_code: str = "BUSINESS_RULE_VIOLATION",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=400,
            error_code=error_code,
            details=details,
        )


class DuplicateNameError(BusinessRuleError):
    """Raised when an account or card name is already used by the same owner."""

    def __init__(
        self,
        resource: str,
        name: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=f"{resource} with name '{name}' already exists",
            error_code="DUPLICATE_NAME",
            details=details,
        )


class DuplicateEmailError(BusinessRuleError):
    """Raised when an email address is already registered."""

    def __init__(
        self,
        message: str = "Email is already in use",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="DUPLICATE_EMAIL",
            details=details,
        )


class HasDependentsError(BusinessRuleError):
    """Raised when a delete is blocked by dependent records."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="HAS_DEPENDENTS",
            details=details,
        )


class InvalidReferenceError(BusinessRuleError):
    """Raised when a transaction points at an account or card the caller doesn't own."""

    def __init__(
        self,
        resource: str,
        resource_id: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=f"{resource} {resource_id} is not available to this user",
            error_code="INVALID_REFERENCE",
            details=details or {"resource": resource.lower(), "id": resource_id},
        )


class IncorrectPasswordError(BusinessRuleError):
    """Raised when the current password given for a password change is wrong."""

    def __init__(
        self,
        message: str = "Current password is incorrect",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="INCORRECT_PASSWORD",
            details=details,
        )


class WeakPasswordError(BusinessRuleError):
    """Raised when a password doesn't meet the length requirement."""

    def __init__(
        self,
        message: str = "Password does not meet security requirements",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="WEAK_PASSWORD",
            details=details,
        )
