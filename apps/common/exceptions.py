"""
Error taxonomy shared by all ReWear services.

Every service error belongs to exactly one kind below. App-specific
exceptions (listings, exchange) subclass one of these kinds so views can
translate them into HTTP responses without knowing every concrete class.
"""


class ServiceError(Exception):
    """Base exception for all service errors."""

    code = 'service_error'


class NotFoundError(ServiceError):
    """Raised when an entity does not exist."""

    code = 'not_found'


class InvalidTransitionError(ServiceError):
    """Raised when an operation would break the listing state machine."""

    code = 'invalid_transition'


class InsufficientFundsError(ServiceError):
    """Raised when a points balance cannot cover a debit."""

    code = 'insufficient_funds'


class ConflictRetryError(ServiceError):
    """Raised when a concurrent write won the race. Re-read and retry."""

    code = 'conflict_retry'


class UnauthorizedError(ServiceError):
    """Raised when the actor is not permitted to perform the operation."""

    code = 'unauthorized'


class ServiceUnavailableError(ServiceError):
    """Raised on backing store timeout or outage. Retry with backoff."""

    code = 'unavailable'


class ValidationFailedError(ServiceError):
    """Raised when input passes the serializer but breaks a business rule."""

    code = 'validation_failed'
