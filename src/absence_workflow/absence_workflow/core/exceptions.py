class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass carries a stable machine-readable ``code`` and the HTTP
    status the boundary answers with.
    """

    code = "DOMAIN_ERROR"
    http_status = 400


class ValidationError(DomainError):
    """Raised when input data is malformed or out of range."""

    code = "VALIDATION_FAILED"
    http_status = 400


class AuthenticationError(DomainError):
    """Raised when the caller cannot be resolved to an actor."""

    code = "UNAUTHORIZED"
    http_status = 401


class AuthorizationError(DomainError):
    """Raised when an actor lacks permission for an action."""

    code = "FORBIDDEN"
    http_status = 403


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""

    code = "NOT_FOUND"
    http_status = 404


class AlreadyDecidedError(DomainError):
    """Raised when a decision targets a request that is no longer pending."""

    code = "ALREADY_DECIDED"
    http_status = 409


class QuotaExhaustedError(DomainError):
    """Raised when a group has used up its leave allowance."""

    code = "QUOTA_EXHAUSTED"
    http_status = 409


class InvalidRelationError(DomainError):
    """Raised when referenced entities are inconsistent with each other."""

    code = "INVALID_RELATION"
    http_status = 422


class StoreError(DomainError):
    """Raised when the record store fails. Not retried here."""

    code = "STORE_FAILURE"
    http_status = 500
