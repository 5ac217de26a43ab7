class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is missing or malformed."""


class ConflictError(DomainError):
    """Raised when an operation would break the one-open-session rule."""


class NotFoundError(DomainError):
    """Raised when a referenced session, record or employee does not exist."""


class InvalidOperationError(DomainError):
    """Raised when an operation targets a synthetic (non-persisted) row."""
