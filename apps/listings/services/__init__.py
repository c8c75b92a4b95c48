"""
Listings app services layer.

Services take the DocumentGateway they read and write through as their
first argument.
"""

from .exceptions import (
    ListingNotFoundError,
    NotListingOwnerError,
    ListingNotEditableError,
    ListingValidationError,
)

from .listing_management import (
    create_listing,
    update_listing,
    normalize_tags,
)

from .listing_queries import (
    browse_listings,
    get_listing_detail,
    get_user_listings,
    get_featured_listings,
    get_category_counts,
)


__all__ = [
    # Exceptions
    'ListingNotFoundError',
    'NotListingOwnerError',
    'ListingNotEditableError',
    'ListingValidationError',

    # Listing Management
    'create_listing',
    'update_listing',
    'normalize_tags',

    # Queries
    'browse_listings',
    'get_listing_detail',
    'get_user_listings',
    'get_featured_listings',
    'get_category_counts',
]
