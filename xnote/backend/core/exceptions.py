"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a resource cannot be found."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class AuthenticationError(ApplicationError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, code="AUTH_UNAUTHORIZED")


class ConflictError(ApplicationError):
    """Raised when there is a state conflict."""

    def __init__(self, message: str = "Resource conflict", code: str = "RES_CONFLICT") -> None:
        super().__init__(message, code=code)


class InvalidTransitionError(ConflictError):
    """Raised when a note lifecycle move is not allowed from its current state."""

    def __init__(self, message: str = "Invalid lifecycle transition") -> None:
        super().__init__(message, code="RES_INVALID_TRANSITION")


class DatabaseError(ApplicationError):
    """Raised when a database operation fails or the store is unreachable."""

    def __init__(self, message: str = "Database error") -> None:
        super().__init__(message, code="SYS_DATABASE_ERROR")
