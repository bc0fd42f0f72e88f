class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is malformed or a required field is missing."""


class NotFoundError(DomainError):
    """Raised when an identifier does not match any stored entity."""


class InvariantViolation(DomainError):
    """Raised when a request would break a cross-field or cross-entity rule."""


class StorageError(DomainError):
    """Raised when the database rejects or fails a transaction."""
