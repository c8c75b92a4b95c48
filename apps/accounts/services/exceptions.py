"""Domain-specific exceptions for accounts services."""

from apps.common.exceptions import ServiceError, UnauthorizedError, ValidationFailedError


class AccountsServiceError(ServiceError):
    """Base exception for accounts services."""
    pass


class UserRegistrationError(AccountsServiceError, ValidationFailedError):
    """Raised when user registration fails."""
    pass


class InvalidCredentialsError(AccountsServiceError, UnauthorizedError):
    """Raised when authentication credentials are invalid."""
    pass


class InactiveAccountError(AccountsServiceError, UnauthorizedError):
    """Raised when account is deactivated."""
    pass


class GuestAccountError(AccountsServiceError, UnauthorizedError):
    """Raised when a password sign-in targets a guest account."""
    pass
