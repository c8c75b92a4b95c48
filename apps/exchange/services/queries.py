"""
Read-side queries for swap requests and the admin panel.

Plain QuerySets from the gateway; nothing here writes.
"""

from typing import Optional

from django.db.models import QuerySet

from apps.accounts.models import User
from apps.common.gateway import DocumentGateway
from apps.exchange.models import PointsAccount, SwapRequest
from apps.listings.models import Listing


def get_user_swap_requests(gateway: DocumentGateway, *, user: User) -> QuerySet:
    """Swap requests the user has made, newest first."""
    return (
        gateway.query(SwapRequest, requester=user)
        .select_related('listing', 'listing__owner', 'requester')
        .order_by('-created_at')
    )


def get_incoming_swap_requests(gateway: DocumentGateway, *, owner: User) -> QuerySet:
    """Swap requests on the owner's listings, newest first."""
    return (
        gateway.query(SwapRequest, listing__owner=owner)
        .select_related('listing', 'listing__owner', 'requester')
        .order_by('-created_at')
    )


def get_all_accounts(gateway: DocumentGateway) -> QuerySet:
    """Every points account with its user, for the admin panel."""
    return (
        gateway.query(PointsAccount)
        .select_related('user')
        .order_by('user__email')
    )


def get_all_listings(gateway: DocumentGateway, *, status: Optional[str] = None) -> QuerySet:
    """Listings in every status (or one status), for the admin panel."""
    filters = {'status': status} if status else {}
    return (
        gateway.query(Listing, **filters)
        .select_related('owner')
        .order_by('-created_at')
    )
