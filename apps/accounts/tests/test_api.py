import pytest
from unittest import mock

from django.db import OperationalError
from django.urls import reverse
from rest_framework import status
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.common.apps import get_gateway


# =============================================================================
# Registration Tests
# =============================================================================

@pytest.mark.django_db
class TestRegistration:
    """Tests for POST /api/auth/register/"""

    def test_register_success(self, api_client):
        """Successfully register a new member."""
        url = reverse('users:register')
        data = {
            'email': 'newuser@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
            'display_name': 'New User',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert 'access' in response.data['tokens']
        assert 'refresh' in response.data['tokens']
        assert response.data['user']['role'] == 'member'
        assert response.data['user']['is_guest'] is False
        assert User.objects.filter(email='newuser@example.com').exists()

    def test_register_without_display_name(self, api_client):
        """Register without display name (optional field)."""
        url = reverse('users:register')
        data = {
            'email': 'minimal@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED

    def test_register_duplicate_email(self, api_client, user):
        """Cannot register with existing email."""
        url = reverse('users:register')
        data = {
            'email': user.email,
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'validation_failed'

    def test_register_password_mismatch(self, api_client):
        """Registration fails when passwords don't match."""
        url = reverse('users:register')
        data = {
            'email': 'mismatch@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'DifferentPass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password_confirm' in response.data

    def test_register_weak_password(self, api_client):
        """Registration fails with weak password."""
        url = reverse('users:register')
        data = {
            'email': 'weak@example.com',
            'password': '123',
            'password_confirm': '123',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_register_cannot_choose_role(self, api_client):
        """Role in the payload is ignored; new accounts are members."""
        url = reverse('users:register')
        data = {
            'email': 'sneaky@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
            'role': 'admin',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert User.objects.get(email='sneaky@example.com').role == 'member'


# =============================================================================
# Login Tests
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_login_success(self, api_client, user):
        """Successfully login with valid credentials."""
        url = reverse('users:login')
        response = api_client.post(url, {
            'email': 'testuser@example.com',
            'password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_200_OK
        assert 'tokens' in response.data
        assert response.data['user']['email'] == user.email

    def test_login_wrong_password(self, api_client, user):
        """Login fails with wrong password."""
        url = reverse('users:login')
        response = api_client.post(url, {
            'email': 'testuser@example.com',
            'password': 'WrongPass123!',
        })

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['code'] == 'unauthorized'

    def test_login_nonexistent_user(self, api_client):
        """Login fails for unknown email."""
        url = reverse('users:login')
        response = api_client.post(url, {
            'email': 'nobody@example.com',
            'password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_login_inactive_user(self, api_client, user_inactive):
        """Login fails for a deactivated account."""
        url = reverse('users:login')
        response = api_client.post(url, {
            'email': 'inactive@example.com',
            'password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert 'deactivated' in response.data['error']

    def test_login_updates_last_login(self, api_client, user):
        """Login updates last_login timestamp."""
        assert user.last_login is None

        url = reverse('users:login')
        api_client.post(url, {
            'email': 'testuser@example.com',
            'password': 'TestPass123!',
        })

        user.refresh_from_db()
        assert user.last_login is not None

    def test_login_guest_account_refused(self, api_client):
        """Guests can't sign in with a password."""
        guest = User.objects.create_guest()

        url = reverse('users:login')
        response = api_client.post(url, {
            'email': guest.email,
            'password': 'anything',
        })

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert 'anonymously' in response.data['error']

    def test_login_database_outage(self, api_client, user):
        """A database outage is reported as retryable."""
        url = reverse('users:login')
        with mock.patch.object(get_gateway(), 'query', side_effect=OperationalError('database is locked')):
            response = api_client.post(url, {
                'email': 'testuser@example.com',
                'password': 'TestPass123!',
            })

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.data['retry'] is True


# =============================================================================
# Anonymous Sign-in Tests
# =============================================================================

@pytest.mark.django_db
class TestAnonymousLogin:
    """Tests for POST /api/auth/anonymous/"""

    def test_anonymous_login_creates_guest(self, api_client):
        url = reverse('users:anonymous-login')
        response = api_client.post(url)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['user']['is_guest'] is True
        assert 'access' in response.data['tokens']

        guest = User.objects.get(id=response.data['user']['id'])
        assert guest.is_guest
        assert not guest.has_usable_password()

    def test_each_anonymous_login_is_a_new_guest(self, api_client):
        url = reverse('users:anonymous-login')
        first = api_client.post(url)
        second = api_client.post(url)

        assert first.data['user']['id'] != second.data['user']['id']


# =============================================================================
# Logout Tests
# =============================================================================

@pytest.mark.django_db
class TestLogout:
    """Tests for POST /api/auth/logout/"""

    def test_logout_success(self, authenticated_client, user):
        url = reverse('users:logout')
        refresh = RefreshToken.for_user(user)
        response = authenticated_client.post(url, {'refresh': str(refresh)})

        assert response.status_code == status.HTTP_200_OK

    def test_logout_invalid_token(self, authenticated_client):
        url = reverse('users:logout')
        response = authenticated_client.post(url, {'refresh': 'not-a-token'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_logout_unauthenticated(self, api_client):
        url = reverse('users:logout')
        response = api_client.post(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Current User Tests
# =============================================================================

@pytest.mark.django_db
class TestGetCurrentUser:
    """Tests for GET /api/auth/user/"""

    def test_get_current_user(self, authenticated_client, user):
        url = reverse('users:current-user')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == user.email
        assert response.data['points'] == 0
        assert 'member_since' in response.data

    def test_get_current_user_shows_balance(self, authenticated_client, user, admin_user):
        from apps.common.apps import get_gateway
        from apps.exchange.services import credit

        credit(get_gateway(), user_id=user.id, amount=120, granted_by=admin_user)

        response = authenticated_client.get(reverse('users:current-user'))

        assert response.data['points'] == 120

    def test_get_current_user_unauthenticated(self, api_client):
        url = reverse('users:current-user')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Update Profile Tests
# =============================================================================

@pytest.mark.django_db
class TestUpdateProfile:
    """Tests for PATCH /api/auth/user/update/"""

    def test_update_display_name(self, authenticated_client, user):
        url = reverse('users:update-profile')
        response = authenticated_client.patch(url, {'display_name': 'Renamed'})

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.display_name == 'Renamed'

    def test_cannot_update_role(self, authenticated_client, user):
        """Role is read-only through the API."""
        url = reverse('users:update-profile')
        authenticated_client.patch(url, {'role': 'admin'})

        user.refresh_from_db()
        assert user.role == 'member'

    def test_cannot_update_email(self, authenticated_client, user):
        url = reverse('users:update-profile')
        authenticated_client.patch(url, {'email': 'changed@example.com'})

        user.refresh_from_db()
        assert user.email == 'testuser@example.com'


# =============================================================================
# Public Profile Tests
# =============================================================================

@pytest.mark.django_db
class TestGetUserById:
    """Tests for GET /api/auth/users/{id}/"""

    def test_get_user_by_id(self, authenticated_client, other_user):
        url = reverse('users:user-detail', kwargs={'pk': other_user.id})
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['display_name'] == 'Other User'
        assert 'email' not in response.data

    def test_get_user_by_id_not_found(self, authenticated_client):
        url = reverse('users:user-detail', kwargs={'pk': '00000000-0000-0000-0000-000000000000'})
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
