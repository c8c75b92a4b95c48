"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    GuestAccountError,
)
from .user_registration import register_user, sign_in_anonymously
from .user_authentication import authenticate_user

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'GuestAccountError',
    # Services
    'register_user',
    'sign_in_anonymously',
    'authenticate_user',
]
