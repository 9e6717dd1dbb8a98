class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced client, appointment or document is missing."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class ExternalServiceError(DomainError):
    """Raised when a call to the document database fails."""
