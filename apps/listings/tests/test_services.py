import pytest
from unittest import mock

from django.db import OperationalError

from apps.common.exceptions import ConflictRetryError, ServiceUnavailableError
from apps.listings.models import Listing, ListingStatus
from apps.listings.services import (
    create_listing,
    update_listing,
    normalize_tags,
    browse_listings,
    get_listing_detail,
    get_user_listings,
    get_featured_listings,
    get_category_counts,
    ListingNotFoundError,
    NotListingOwnerError,
    ListingNotEditableError,
    ListingValidationError,
)


class TestNormalizeTags:

    def test_comma_separated_string(self):
        assert normalize_tags('vintage, denim, ,blue ') == ['vintage', 'denim', 'blue']

    def test_list_is_trimmed(self):
        assert normalize_tags([' a', '', 'b ']) == ['a', 'b']

    def test_empty(self):
        assert normalize_tags(None) == []
        assert normalize_tags('') == []


@pytest.mark.django_db
class TestCreateListing:

    def test_create_listing(self, gateway, owner, listing_data):
        listing = create_listing(gateway, owner=owner, **listing_data)

        assert listing.status == ListingStatus.AVAILABLE
        assert listing.version == 0
        assert listing.tags == ['vintage', 'denim', 'blue']
        assert listing.owner == owner

    def test_create_swap_only_listing(self, gateway, owner, listing_data):
        listing_data['points_value'] = None
        listing = create_listing(gateway, owner=owner, **listing_data)

        assert listing.is_swap_only
        assert not listing.is_redeemable

    def test_too_many_images(self, gateway, owner, listing_data, settings):
        settings.LISTING_MAX_IMAGES = 2
        images = [f'https://img.example.com/{i}.jpg' for i in range(3)]

        with pytest.raises(ListingValidationError):
            create_listing(gateway, owner=owner, images=images, **listing_data)

        assert not Listing.objects.exists()

    def test_negative_points_value(self, gateway, owner, listing_data):
        listing_data['points_value'] = -5

        with pytest.raises(ListingValidationError):
            create_listing(gateway, owner=owner, **listing_data)


@pytest.mark.django_db
class TestUpdateListing:

    def test_owner_can_edit(self, gateway, owner, listing):
        updated = update_listing(gateway, listing_id=listing.id, user=owner, title='Denim Jacket', tags='a,b')

        assert updated.title == 'Denim Jacket'
        assert updated.tags == ['a', 'b']
        assert updated.version == listing.version + 1
        assert updated.status == ListingStatus.AVAILABLE

    def test_non_owner_cannot_edit(self, gateway, other_user, listing):
        with pytest.raises(NotListingOwnerError):
            update_listing(gateway, listing_id=listing.id, user=other_user, title='Mine now')

    def test_status_is_not_editable(self, gateway, owner, listing):
        with pytest.raises(ListingValidationError):
            update_listing(gateway, listing_id=listing.id, user=owner, status=ListingStatus.REDEEMED)

        listing.refresh_from_db()
        assert listing.status == ListingStatus.AVAILABLE

    def test_cannot_edit_redeemed_listing(self, gateway, owner, listing):
        Listing.objects.filter(pk=listing.pk).update(status=ListingStatus.REDEEMED)

        with pytest.raises(ListingNotEditableError):
            update_listing(gateway, listing_id=listing.id, user=owner, title='Too late')

    def test_not_found(self, gateway, owner):
        with pytest.raises(ListingNotFoundError):
            update_listing(
                gateway,
                listing_id='00000000-0000-0000-0000-000000000000',
                user=owner,
                title='Ghost',
            )

    def test_stale_version_conflicts(self, gateway, owner, listing):
        """A write based on a stale read loses and changes nothing."""
        stale = Listing.objects.get(pk=listing.pk)
        Listing.objects.filter(pk=listing.pk).update(version=stale.version + 1)

        with mock.patch.object(gateway, 'get', return_value=stale):
            with pytest.raises(ConflictRetryError):
                update_listing(gateway, listing_id=listing.id, user=owner, title='Lost update')

        listing.refresh_from_db()
        assert listing.title == 'Vintage Denim Jacket'


@pytest.mark.django_db
class TestListingQueries:

    def test_browse_only_available(self, gateway, listing, swap_only_listing):
        Listing.objects.filter(pk=swap_only_listing.pk).update(status=ListingStatus.REJECTED)

        assert list(browse_listings(gateway)) == [listing]

    def test_browse_search_matches_tags(self, gateway, listing, swap_only_listing):
        assert list(browse_listings(gateway, search='denim')) == [listing]
        assert list(browse_listings(gateway, search='knitted')) == [swap_only_listing]

    def test_browse_filters(self, gateway, listing, swap_only_listing):
        assert list(browse_listings(gateway, category='Accessories')) == [swap_only_listing]
        assert list(browse_listings(gateway, size='m')) == [listing]
        assert list(browse_listings(gateway, redeemable_only=True)) == [listing]

    def test_detail_in_any_status(self, gateway, listing):
        Listing.objects.filter(pk=listing.pk).update(status=ListingStatus.SWAPPED)

        assert get_listing_detail(gateway, listing_id=listing.id).status == ListingStatus.SWAPPED

    def test_detail_not_found(self, gateway):
        with pytest.raises(ListingNotFoundError):
            get_listing_detail(gateway, listing_id='00000000-0000-0000-0000-000000000000')

    def test_user_listings_include_every_status(self, gateway, owner, listing, swap_only_listing):
        Listing.objects.filter(pk=listing.pk).update(status=ListingStatus.REDEEMED)

        assert set(get_user_listings(gateway, user=owner)) == {listing, swap_only_listing}

    def test_featured_is_limited(self, gateway, listing, swap_only_listing):
        assert len(list(get_featured_listings(gateway, limit=1))) == 1

    def test_category_counts(self, gateway, listing, swap_only_listing):
        counts = {row['category']: row['count'] for row in get_category_counts(gateway)}

        assert counts['Outerwear'] == 1
        assert counts['Accessories'] == 1
        assert counts['Footwear'] == 0

    def test_outage_is_unavailable(self, gateway, listing):
        with mock.patch.object(
            Listing._default_manager, 'using', side_effect=OperationalError('database is locked')
        ):
            with pytest.raises(ServiceUnavailableError):
                get_listing_detail(gateway, listing_id=listing.id)
