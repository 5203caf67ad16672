class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400


class AuthenticationError(DomainError):
    """Raised when no valid session or credentials are presented."""

    status_code = 401


class NotFoundError(DomainError):
    """Raised when the requested record does not exist."""

    status_code = 404


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403
