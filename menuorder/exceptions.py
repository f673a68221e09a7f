"""Custom exceptions for menu service operations."""


class MenuServiceError(Exception):
    """Base exception for menu service errors."""

    pass


class ValidationError(MenuServiceError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class NotFoundError(MenuServiceError):
    """Raised when an owner, section, service or package is missing or inactive."""

    def __init__(self, resource_type: str, resource_id: str):
        message = f"{resource_type} with ID '{resource_id}' not found"
        super().__init__(message)
        self.resource_type = resource_type
        self.resource_id = resource_id


class DuplicateError(MenuServiceError):
    """Raised when attempting to create a duplicate resource."""

    def __init__(self, resource_type: str, field: str, value: str):
        message = f"{resource_type} with {field} '{value}' already exists"
        super().__init__(message)
        self.resource_type = resource_type
        self.field = field
        self.value = value


class DatabaseError(MenuServiceError):
    """Raised when a database operation fails."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error


class ConstraintViolationError(DatabaseError):
    """Raised when a write would give two active siblings the same position."""


class TransientStoreError(DatabaseError):
    """Raised on connection or timeout failures; the whole request may be retried once."""
