import pytest

from apps.accounts.models import User
from apps.accounts.services import (
    authenticate_user,
    InvalidCredentialsError,
    InactiveAccountError,
    GuestAccountError,
)
from apps.common.apps import get_gateway


@pytest.fixture
def gateway(db):
    return get_gateway()


@pytest.mark.django_db
class TestAuthenticateUser:

    def test_success_stamps_last_login(self, gateway, user):
        signed_in = authenticate_user(gateway, email='testuser@example.com', password='TestPass123!')

        assert signed_in.pk == user.pk
        assert signed_in.last_login is not None
        user.refresh_from_db()
        assert user.last_login == signed_in.last_login

    def test_email_is_normalized(self, gateway, user):
        signed_in = authenticate_user(gateway, email='testuser@EXAMPLE.COM', password='TestPass123!')

        assert signed_in.pk == user.pk

    def test_wrong_password(self, gateway, user):
        with pytest.raises(InvalidCredentialsError):
            authenticate_user(gateway, email='testuser@example.com', password='nope')

        user.refresh_from_db()
        assert user.last_login is None

    def test_guest_refused(self, gateway):
        guest = User.objects.create_guest()

        with pytest.raises(GuestAccountError):
            authenticate_user(gateway, email=guest.email, password='')

    def test_inactive_refused(self, gateway, user_inactive):
        with pytest.raises(InactiveAccountError):
            authenticate_user(gateway, email='inactive@example.com', password='TestPass123!')

        user_inactive.refresh_from_db()
        assert user_inactive.last_login is None
