"""Email and password sign-in."""

import logging

from django.contrib.auth import get_user_model
from django.utils import timezone

from apps.common.gateway import DocumentGateway

from .exceptions import InvalidCredentialsError, InactiveAccountError, GuestAccountError

User = get_user_model()
logger = logging.getLogger(__name__)


def authenticate_user(gateway: DocumentGateway, *, email: str, password: str) -> User:
    """
    Check a member's credentials and stamp their last login.

    Guest accounts have no password and can only be reached through
    anonymous sign-in. The last-login write is conditional on the account
    still being active, so a deactivation racing the sign-in wins.

    Args:
        gateway: Document gateway to read and write through
        email: Member's email, normalized before lookup
        password: Plain-text password

    Returns:
        The signed-in User

    Raises:
        InvalidCredentialsError: If no member matches the email and password
        GuestAccountError: If the email belongs to a guest account
        InactiveAccountError: If the account is deactivated
        ServiceUnavailableError: If the database can't be reached
    """
    with gateway.guard(), gateway.atomic():
        user = gateway.query(User, email=User.objects.normalize_email(email)).first()
        if user is None:
            raise InvalidCredentialsError("Invalid email or password")

        if user.is_guest:
            raise GuestAccountError("Guest accounts sign in anonymously")

        if not user.check_password(password):
            raise InvalidCredentialsError("Invalid email or password")

        now = timezone.now()
        signed_in = gateway.conditional_write(
            User,
            user.pk,
            expected={'is_active': True},
            changes={'last_login': now},
        )
        if not signed_in:
            raise InactiveAccountError("Account is deactivated")
        user.last_login = now

    logger.info("User %s signed in", user.id)
    return user
