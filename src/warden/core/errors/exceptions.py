"""Domain exceptions for the application.

These exceptions represent business-logic errors and are automatically
converted to RFC 7807 Problem Details responses by the exception handlers.
Anything not derived from AppException is treated as a backend failure
and surfaces as a generic 500.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    All domain exceptions should inherit from this class.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for clients
        status_code: HTTP status code for the response
        details: Additional error details
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Raised when an entity, association or live token is absent.

    Example:
        raise NotFoundError("Account not found", resource="account", resource_id=account_id)
    """

    message = "Resource not found"
    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message=message, details=details, **kwargs)


class ConflictError(AppException):
    """Raised when there's a conflict with existing data.

    Example:
        raise ConflictError("Role name already taken", details={"name": name})
    """

    message = "Resource conflict"
    error_code = "conflict"
    status_code = 409


class AlreadyExistsError(ConflictError):
    """Raised when a unique constraint rejects a new entity."""

    message = "Resource already exists"
    error_code = "already_exists"


class DuplicateEmailError(AlreadyExistsError):
    """Raised when an account is created with an email already in use."""

    message = "Email already registered"
    error_code = "duplicate_email"


class AlreadyAssignedError(ConflictError):
    """Raised when an account-role or role-permission pair already exists."""

    message = "Already assigned"
    error_code = "already_assigned"


class AlreadyLoggedInError(ConflictError):
    """Raised when an account logs in while it still holds a live session."""

    message = "Account already has an active session"
    error_code = "already_logged_in"


class ValidationError(AppException):
    """Raised when request data fails validation.

    Example:
        raise ValidationError(
            "Invalid input data",
            errors=[{"field": "email", "message": "Invalid email format"}]
        )
    """

    message = "Validation error"
    error_code = "validation_error"
    status_code = 422

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if errors:
            details["errors"] = errors
        super().__init__(message=message, details=details, **kwargs)


class UnauthorizedError(AppException):
    """Raised when authentication is required but not provided or invalid.

    Example:
        raise UnauthorizedError("Invalid access token")
    """

    message = "Authentication required"
    error_code = "unauthorized"
    status_code = 401


class WrongPasswordError(UnauthorizedError):
    """Raised when login credentials do not match.

    Also used for unknown emails so callers cannot probe which
    addresses are registered.
    """

    message = "Invalid email or password"
    error_code = "invalid_credentials"


class ForbiddenError(AppException):
    """Raised when a valid session lacks the grant for an action.

    Example:
        raise ForbiddenError(
            "Insufficient permissions",
            details={"required_permission": "manage-inventory"}
        )
    """

    message = "Access forbidden"
    error_code = "forbidden"
    status_code = 403
