"""
Listing read queries.

Browse, detail, dashboard and landing-page reads. Nothing here writes.
"""

from typing import Optional
from uuid import UUID

from django.db.models import Count, Q, QuerySet

from apps.accounts.models import User
from apps.common.gateway import DocumentGateway
from apps.listings.models import Listing, ListingStatus, Category

from .exceptions import ListingNotFoundError


def browse_listings(
    gateway: DocumentGateway,
    *,
    search: Optional[str] = None,
    category: Optional[str] = None,
    condition: Optional[str] = None,
    size: Optional[str] = None,
    redeemable_only: bool = False,
) -> QuerySet[Listing]:
    """
    Search available listings.

    Args:
        gateway: Document gateway to read through
        search: Search term for title, description, type and tags
        category: Filter by category
        condition: Filter by condition
        size: Filter by size (case-insensitive exact)
        redeemable_only: Only listings with a positive points value

    Returns:
        Filtered QuerySet of available listings, newest first
    """
    queryset = gateway.query(Listing, status=ListingStatus.AVAILABLE).select_related('owner')

    if search:
        queryset = queryset.filter(
            Q(title__icontains=search) |
            Q(description__icontains=search) |
            Q(garment_type__icontains=search) |
            Q(tags__icontains=search)
        )

    if category:
        queryset = queryset.filter(category=category)

    if condition:
        queryset = queryset.filter(condition=condition)

    if size:
        queryset = queryset.filter(size__iexact=size)

    if redeemable_only:
        queryset = queryset.filter(points_value__gt=0)

    return queryset.order_by('-created_at')


def get_listing_detail(gateway: DocumentGateway, *, listing_id: UUID) -> Listing:
    """
    Get a listing in any status, with its owner.

    Raises:
        ListingNotFoundError: If listing doesn't exist
    """
    with gateway.guard():
        listing = gateway.query(Listing, pk=listing_id).select_related('owner').first()
    if listing is None:
        raise ListingNotFoundError(f"Listing with ID {listing_id} not found")
    return listing


def get_user_listings(gateway: DocumentGateway, *, user: User) -> QuerySet[Listing]:
    """All listings owned by a user, in every status (dashboard)."""
    return gateway.query(Listing, owner=user).order_by('-created_at')


def get_featured_listings(gateway: DocumentGateway, *, limit: int) -> QuerySet[Listing]:
    """Newest available listings for the landing page."""
    return browse_listings(gateway)[:limit]


def get_category_counts(gateway: DocumentGateway) -> list[dict]:
    """
    Available listing count per category, every category included.

    Returns:
        List of {'category': str, 'count': int} in category order
    """
    with gateway.guard():
        counts = dict(
            gateway.query(Listing, status=ListingStatus.AVAILABLE)
            .values_list('category')
            .annotate(count=Count('id'))
            .order_by()
        )
    return [
        {'category': category.value, 'count': counts.get(category.value, 0)}
        for category in Category
    ]
