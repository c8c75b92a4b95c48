"""User registration service."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from .exceptions import UserRegistrationError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    display_name: str = ""
) -> User:
    """
    Register a new member with email and password.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        display_name: Optional display name

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email is already registered
    """
    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            display_name=display_name
        )
    except IntegrityError:
        raise UserRegistrationError("An account with this email already exists")

    logger.info("Registered user %s", user.id)
    return user


@transaction.atomic
def sign_in_anonymously() -> User:
    """
    Create a guest user for anonymous browsing.

    Guests get a real user id so the ledger can attribute their actions,
    but no usable password.

    Returns:
        Created guest User instance
    """
    user = User.objects.create_guest()
    logger.info("Created guest user %s", user.id)
    return user
