from enum import StrEnum


class ErrorKind(StrEnum):
    APPLICATION = "application"
    GENERIC = "generic"


def error_kind(exc: BaseException) -> ErrorKind:
    """Anything that does not declare a kind is treated as generic."""
    return getattr(exc, "kind", ErrorKind.GENERIC)


class AppError(Exception):
    """Base exception for application errors."""

    kind = ErrorKind.APPLICATION
    status_code = 500

    def __init__(
        self,
        message: str = "An error occurred",
        additional_info: str | None = None,
        error_code: str | None = None,
    ):
        self.message = message
        self.additional_info = additional_info
        self.error_code = error_code
        super().__init__(self.message)


class NotFoundError(AppError):
    """Raised when a requested resource does not exist."""

    status_code = 404

    def __init__(self, resource: str = "Resource", id: str = ""):
        super().__init__(
            f"{resource} not found: {id}" if id else f"{resource} not found",
            error_code="NOT_FOUND",
        )


class ValidationError(AppError):
    """Raised when input is well-formed but not acceptable."""

    status_code = 400

    def __init__(self, message: str = "Invalid request", additional_info: str | None = None):
        super().__init__(message, additional_info=additional_info, error_code="VALIDATION_ERROR")


class ConflictError(AppError):
    """Raised when a write collides with existing data."""

    status_code = 409

    def __init__(self, message: str = "Resource already exists"):
        super().__init__(message, error_code="CONFLICT")


class AuthenticationError(AppError):
    """Raised when credentials are invalid."""

    status_code = 401

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, error_code="UNAUTHENTICATED")


class AuthorizationError(AppError):
    """Raised when a user lacks permission for an action."""

    status_code = 403

    def __init__(self, message: str = "Permission denied"):
        super().__init__(message, error_code="FORBIDDEN")
