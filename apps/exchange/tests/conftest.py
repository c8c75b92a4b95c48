import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, UserRole
from apps.common.apps import get_gateway
from apps.exchange.models import PointsAccount
from apps.exchange.services import ExchangeLedger
from apps.listings.models import Listing, Category, Condition


@pytest.fixture
def gateway(db):
    """The process-wide document gateway."""
    return get_gateway()


@pytest.fixture
def ledger(gateway):
    return ExchangeLedger(gateway)


def _make_user(email, **extra):
    return User.objects.create_user(
        email=email,
        password='TestPass123!',
        display_name=email.split('@')[0].title(),
        **extra
    )


@pytest.fixture
def owner(db):
    """U1: lists the garment."""
    return _make_user('owner@example.com')


@pytest.fixture
def buyer(db):
    """U2: wants the garment."""
    return _make_user('buyer@example.com')


@pytest.fixture
def third_user(db):
    """U3: also wants the garment."""
    return _make_user('third@example.com')


@pytest.fixture
def admin_user(db):
    return _make_user('admin@example.com', role=UserRole.ADMIN)


@pytest.fixture
def set_balance(db):
    """Set a user's points balance directly."""

    def _set_balance(user, balance):
        account, _ = PointsAccount.objects.update_or_create(
            user=user,
            defaults={'balance': balance},
        )
        return account

    return _set_balance


@pytest.fixture
def balance_of(db):
    """Read a user's stored balance (0 without an account)."""

    def _balance_of(user):
        account = PointsAccount.objects.filter(user=user).first()
        return account.balance if account else 0

    return _balance_of


def _make_listing(owner, title, points_value):
    return Listing.objects.create(
        owner=owner,
        title=title,
        description=f'{title} description',
        category=Category.TOPS,
        garment_type='T-Shirt',
        size='M',
        condition=Condition.GOOD,
        points_value=points_value,
    )


@pytest.fixture
def listing(owner):
    """L1: available, points value 100."""
    return _make_listing(owner, 'Organic Cotton Tee', 100)


@pytest.fixture
def second_listing(owner):
    return _make_listing(owner, 'Linen Shirt', 100)


@pytest.fixture
def swap_only_listing(owner):
    return _make_listing(owner, 'Band Tee', None)


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def owner_client(owner):
    return _client_for(owner)


@pytest.fixture
def buyer_client(buyer):
    return _client_for(buyer)


@pytest.fixture
def admin_client(admin_user):
    return _client_for(admin_user)


@pytest.fixture
def third_client(third_user):
    return _client_for(third_user)
