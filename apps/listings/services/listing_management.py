"""
Listing management service.

Owner-side flows: create a listing and edit its details. Status is never
touched here; see ``apps.exchange.services.ledger``.
"""

import logging
from typing import Iterable, Optional, Union
from uuid import UUID

from django.conf import settings

from apps.accounts.models import User
from apps.common.exceptions import ConflictRetryError
from apps.common.gateway import DocumentGateway
from apps.listings.models import Listing, ListingStatus

from .exceptions import (
    ListingNotFoundError,
    NotListingOwnerError,
    ListingNotEditableError,
    ListingValidationError,
)

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({
    'title',
    'description',
    'category',
    'garment_type',
    'size',
    'condition',
    'tags',
    'images',
    'points_value',
})


def normalize_tags(tags: Union[str, Iterable[str], None]) -> list[str]:
    """
    Turn a comma-separated string or a list into clean tags.

    Whitespace is trimmed and empty entries dropped:
    ``"vintage, denim, ,blue"`` -> ``['vintage', 'denim', 'blue']``
    """
    if not tags:
        return []
    if isinstance(tags, str):
        tags = tags.split(',')
    return [tag.strip() for tag in tags if tag and tag.strip()]


def _validate(*, images: list, points_value: Optional[int]) -> None:
    max_images = settings.LISTING_MAX_IMAGES
    if len(images) > max_images:
        raise ListingValidationError(f"You can upload a maximum of {max_images} images.")
    if points_value is not None and points_value < 0:
        raise ListingValidationError("Points value cannot be negative.")


def create_listing(
    gateway: DocumentGateway,
    *,
    owner: User,
    title: str,
    description: str,
    category: str,
    garment_type: str,
    size: str,
    condition: str,
    tags: Union[str, Iterable[str], None] = None,
    images: Optional[list] = None,
    points_value: Optional[int] = None,
) -> Listing:
    """
    Create a new available listing.

    Args:
        gateway: Document gateway to write through
        owner: User listing the garment
        title, description, category, garment_type, size, condition:
            Garment details
        tags: Comma-separated string or list of tags
        images: Image URLs (at most LISTING_MAX_IMAGES)
        points_value: Redemption price, or None for swap-only

    Returns:
        Created Listing instance

    Raises:
        ListingValidationError: If too many images or negative points value
    """
    images = list(images or [])
    _validate(images=images, points_value=points_value)

    with gateway.guard(), gateway.atomic():
        listing = gateway.create(
            Listing,
            owner=owner,
            title=title,
            description=description,
            category=category,
            garment_type=garment_type,
            size=size,
            condition=condition,
            tags=normalize_tags(tags),
            images=images,
            points_value=points_value,
            status=ListingStatus.AVAILABLE,
        )

    logger.info("Listing %s created by %s", listing.id, owner.id)
    return listing


def update_listing(
    gateway: DocumentGateway,
    *,
    listing_id: UUID,
    user: User,
    **changes,
) -> Listing:
    """
    Edit the details of an available listing.

    The write is conditional on the listing still being available at the
    version that was read, so an edit can't race a redemption.

    Args:
        gateway: Document gateway to write through
        listing_id: UUID of the listing
        user: User performing the edit (must be the owner)
        **changes: Subset of EDITABLE_FIELDS

    Returns:
        Updated Listing instance

    Raises:
        ListingNotFoundError: If listing doesn't exist
        NotListingOwnerError: If user is not the owner
        ListingNotEditableError: If listing is not available
        ListingValidationError: If a field is not editable or invalid
        ConflictRetryError: If the listing changed concurrently
    """
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ListingValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

    with gateway.guard(), gateway.atomic():
        listing = gateway.get(Listing, listing_id)
        if listing is None:
            raise ListingNotFoundError(f"Listing with ID {listing_id} not found")

        if listing.owner_id != user.id:
            raise NotListingOwnerError("Only the owner can edit this listing")

        if listing.status != ListingStatus.AVAILABLE:
            raise ListingNotEditableError(
                f"Listing is {listing.status} and can no longer be edited"
            )

        if 'tags' in changes:
            changes['tags'] = normalize_tags(changes['tags'])
        _validate(
            images=list(changes.get('images', listing.images)),
            points_value=changes.get('points_value', listing.points_value),
        )

        written = gateway.conditional_write(
            Listing,
            listing.pk,
            expected={'status': ListingStatus.AVAILABLE, 'version': listing.version},
            changes=changes,
        )
        if not written:
            raise ConflictRetryError("Listing was changed by someone else. Please reload.")

        return gateway.get(Listing, listing.pk)
