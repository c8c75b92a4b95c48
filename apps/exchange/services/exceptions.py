"""
Domain-specific exceptions for exchange services.

Each exception belongs to one kind of the shared taxonomy in
``apps.common.exceptions`` so views can map it to an HTTP status.
"""

from apps.common.exceptions import (
    NotFoundError,
    InvalidTransitionError,
    UnauthorizedError,
    ValidationFailedError,
)


class SwapRequestNotFoundError(NotFoundError):
    """Raised when a swap request does not exist."""
    pass


class ListingNotRedeemableError(InvalidTransitionError):
    """Raised when redeeming a listing that is not available or has no points value."""
    pass


class SwapAlreadyPendingError(InvalidTransitionError):
    """Raised when the listing already has an open swap request."""
    pass


class OwnerCannotSwapOwnListingError(UnauthorizedError):
    """Raised when an owner requests a swap for their own listing."""
    pass


class OwnerCannotRedeemOwnListingError(UnauthorizedError):
    """Raised when an owner tries to redeem their own listing."""
    pass


class InsufficientPermissionsError(UnauthorizedError):
    """Raised when the actor lacks the role or relationship for the operation."""
    pass


class InvalidAmountError(ValidationFailedError):
    """Raised when a points amount is not a positive integer."""
    pass


class InvalidModerationActionError(ValidationFailedError):
    """Raised when a moderation action is neither approve nor reject."""
    pass


class AccountNotFoundError(NotFoundError):
    """Raised when granting points to a user that does not exist."""
    pass
