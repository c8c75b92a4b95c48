"""
Domain-specific exceptions for listings services.

Each exception belongs to one kind of the shared taxonomy in
``apps.common.exceptions`` so views can map it to an HTTP status.
"""

from apps.common.exceptions import (
    NotFoundError,
    InvalidTransitionError,
    UnauthorizedError,
    ValidationFailedError,
)


class ListingNotFoundError(NotFoundError):
    """Raised when a listing does not exist."""
    pass


class NotListingOwnerError(UnauthorizedError):
    """Raised when someone other than the owner edits a listing."""
    pass


class ListingNotEditableError(InvalidTransitionError):
    """Raised when editing a listing that is no longer available."""
    pass


class ListingValidationError(ValidationFailedError):
    """Raised when listing data breaks a business rule."""
    pass
