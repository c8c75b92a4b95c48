import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.common.apps import get_gateway
from apps.listings.models import Listing, Category, Condition


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def gateway(db):
    """The process-wide document gateway."""
    return get_gateway()


@pytest.fixture
def owner(db):
    return User.objects.create_user(
        email='owner@example.com',
        password='TestPass123!',
        display_name='Owner',
    )


@pytest.fixture
def other_user(db):
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Other',
    )


@pytest.fixture
def owner_client(api_client, owner):
    """Return an API client authenticated as the listing owner."""
    refresh = RefreshToken.for_user(owner)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def other_client(other_user):
    client = APIClient()
    refresh = RefreshToken.for_user(other_user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def listing_data():
    return {
        'title': 'Vintage Denim Jacket',
        'description': 'Classic 90s cut, barely worn.',
        'category': Category.OUTERWEAR,
        'garment_type': 'Jacket',
        'size': 'M',
        'condition': Condition.EXCELLENT,
        'tags': 'vintage, denim, blue',
        'points_value': 100,
    }


@pytest.fixture
def listing(owner):
    """An available, redeemable listing."""
    return Listing.objects.create(
        owner=owner,
        title='Vintage Denim Jacket',
        description='Classic 90s cut, barely worn.',
        category=Category.OUTERWEAR,
        garment_type='Jacket',
        size='M',
        condition=Condition.EXCELLENT,
        tags=['vintage', 'denim'],
        images=['https://img.example.com/jacket.jpg'],
        points_value=100,
    )


@pytest.fixture
def swap_only_listing(owner):
    return Listing.objects.create(
        owner=owner,
        title='Wool Beanie',
        description='Hand knitted.',
        category=Category.ACCESSORIES,
        garment_type='Hat',
        size='One size',
        condition=Condition.GOOD,
        tags=['wool'],
    )
