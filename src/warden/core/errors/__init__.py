"""Error handling module with RFC 7807 Problem Details."""

from warden.core.errors.exceptions import (
    AlreadyAssignedError,
    AlreadyExistsError,
    AlreadyLoggedInError,
    AppException,
    ConflictError,
    DuplicateEmailError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
    WrongPasswordError,
)
from warden.core.errors.handlers import (
    FieldError,
    ProblemDetail,
    register_exception_handlers,
)


__all__ = [
    "AlreadyAssignedError",
    "AlreadyExistsError",
    "AlreadyLoggedInError",
    "AppException",
    "ConflictError",
    "DuplicateEmailError",
    "FieldError",
    "ForbiddenError",
    "NotFoundError",
    "ProblemDetail",
    "UnauthorizedError",
    "ValidationError",
    "WrongPasswordError",
    "register_exception_handlers",
]
