"""
Exchange app services layer.

ExchangeLedger owns every listing status change. The points functions and
queries take the DocumentGateway they read and write through as their first
argument.
"""

from .exceptions import (
    SwapRequestNotFoundError,
    ListingNotRedeemableError,
    SwapAlreadyPendingError,
    OwnerCannotSwapOwnListingError,
    OwnerCannotRedeemOwnListingError,
    InsufficientPermissionsError,
    InvalidAmountError,
    InvalidModerationActionError,
    AccountNotFoundError,
)

from .ledger import (
    ExchangeLedger,
    ModerationAction,
    Redemption,
)

from .points import (
    get_or_create_account,
    get_balance,
    debit,
    credit,
    get_history,
)

from .queries import (
    get_user_swap_requests,
    get_incoming_swap_requests,
    get_all_accounts,
    get_all_listings,
)


__all__ = [
    # Exceptions
    'SwapRequestNotFoundError',
    'ListingNotRedeemableError',
    'SwapAlreadyPendingError',
    'OwnerCannotSwapOwnListingError',
    'OwnerCannotRedeemOwnListingError',
    'InsufficientPermissionsError',
    'InvalidAmountError',
    'InvalidModerationActionError',
    'AccountNotFoundError',

    # Ledger
    'ExchangeLedger',
    'ModerationAction',
    'Redemption',

    # Points
    'get_or_create_account',
    'get_balance',
    'debit',
    'credit',
    'get_history',

    # Queries
    'get_user_swap_requests',
    'get_incoming_swap_requests',
    'get_all_accounts',
    'get_all_listings',
]
