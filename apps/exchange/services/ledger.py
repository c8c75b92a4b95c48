"""
Exchange ledger.

The only code allowed to change a listing's status. Every operation runs in
one transaction on the gateway's database and writes through conditional
updates keyed on the version that was read, so a concurrent change makes the
operation fail with ConflictRetryError instead of overwriting it.

    ledger = ExchangeLedger(get_gateway())
    ledger.redeem(listing_id, request.user)
"""

import logging
from typing import NamedTuple
from uuid import UUID

from django.db import IntegrityError
from django.utils import timezone

from apps.accounts.models import User
from apps.common.exceptions import ConflictRetryError, InvalidTransitionError
from apps.common.gateway import DocumentGateway
from apps.exchange.models import PointsAccount, SwapRequest, SwapStatus
from apps.listings.models import Listing, ListingStatus
from apps.listings.services import ListingNotFoundError
from apps.listings.state_machine import ListingStateMachine

from . import points
from .exceptions import (
    SwapRequestNotFoundError,
    ListingNotRedeemableError,
    SwapAlreadyPendingError,
    OwnerCannotSwapOwnListingError,
    OwnerCannotRedeemOwnListingError,
    InsufficientPermissionsError,
    InvalidModerationActionError,
)

logger = logging.getLogger(__name__)

# Loaded with the final read so the result serializes without another query.
LISTING_RELATED = ('owner',)
SWAP_RELATED = ('listing', 'requester')


class ModerationAction:
    APPROVE = 'approve'
    REJECT = 'reject'

    choices = (APPROVE, REJECT)


class Redemption(NamedTuple):
    """The redeemed listing and the redeemer's debited account."""
    listing: Listing
    account: PointsAccount


class ExchangeLedger:
    """Swap, redemption and moderation flows over listings and points."""

    def __init__(self, gateway: DocumentGateway):
        self.gateway = gateway

    # -- swap requests ------------------------------------------------------

    def request_swap(self, listing_id: UUID, requester: User, message: str = '') -> SwapRequest:
        """
        Open a swap request on an available listing.

        The listing stays available. Its version is bumped so two concurrent
        requests can't both pass the "no open request" check.

        Raises:
            ListingNotFoundError: If listing doesn't exist
            OwnerCannotSwapOwnListingError: If requester owns the listing
            InvalidTransitionError: If listing is not available
            SwapAlreadyPendingError: If an open request already exists
            ConflictRetryError: If the listing changed concurrently
        """
        with self.gateway.guard(), self.gateway.atomic():
            listing = self._get_listing(listing_id)

            if listing.owner_id == requester.id:
                raise OwnerCannotSwapOwnListingError("You cannot request a swap for your own listing")

            ListingStateMachine.validate_transition(listing.status, ListingStatus.PENDING_SWAP)

            if self.gateway.query(SwapRequest, listing_id=listing.pk, status=SwapStatus.OPEN).exists():
                raise SwapAlreadyPendingError("This listing already has a pending swap request")

            self._write_listing(listing, {})

            try:
                with self.gateway.atomic():
                    swap = self.gateway.create(
                        SwapRequest,
                        listing=listing,
                        requester=requester,
                        message=message,
                        status=SwapStatus.OPEN,
                    )
            except IntegrityError:
                # One-open-request-per-listing constraint
                raise SwapAlreadyPendingError("This listing already has a pending swap request")

        logger.info("Swap request %s opened on listing %s by %s", swap.id, listing.pk, requester.id)
        return swap

    def accept_swap(self, swap_id: UUID, owner: User) -> SwapRequest:
        """Owner accepts an open request; the listing becomes pending_swap."""
        with self.gateway.guard(), self.gateway.atomic():
            swap, listing = self._get_swap_for_owner(swap_id, owner)
            self._require_swap_status(swap, SwapStatus.OPEN)

            self._transition(listing, ListingStatus.PENDING_SWAP)
            self._write_swap(swap, {'status': SwapStatus.ACCEPTED})
            swap = self._get_swap(swap_id, related=SWAP_RELATED)

        logger.info("Swap request %s accepted", swap_id)
        return swap

    def decline_swap(self, swap_id: UUID, owner: User) -> SwapRequest:
        """Owner declines an open request; the listing is unchanged."""
        with self.gateway.guard(), self.gateway.atomic():
            swap, listing = self._get_swap_for_owner(swap_id, owner)
            self._require_swap_status(swap, SwapStatus.OPEN)

            self._resolve_swap(swap, SwapStatus.DECLINED)
            swap = self._get_swap(swap_id, related=SWAP_RELATED)

        logger.info("Swap request %s declined", swap_id)
        return swap

    def complete_swap(self, swap_id: UUID, owner: User) -> SwapRequest:
        """Owner confirms the handover of an accepted request; the listing is swapped."""
        with self.gateway.guard(), self.gateway.atomic():
            swap, listing = self._get_swap_for_owner(swap_id, owner)
            self._require_swap_status(swap, SwapStatus.ACCEPTED)
            if swap.is_resolved:
                raise InvalidTransitionError("Swap request is already completed")

            self._transition(listing, ListingStatus.SWAPPED)
            self._resolve_swap(swap, SwapStatus.ACCEPTED)
            swap = self._get_swap(swap_id, related=SWAP_RELATED)

        logger.info("Swap request %s completed, listing %s swapped", swap_id, listing.pk)
        return swap

    def cancel_swap(self, swap_id: UUID, actor: User) -> SwapRequest:
        """
        Requester or owner backs out of a request.

        An open request is declined. An accepted request is declined and the
        listing goes back to available.

        Raises:
            SwapRequestNotFoundError: If the request doesn't exist
            InsufficientPermissionsError: If actor is neither requester nor owner
            InvalidTransitionError: If the request is already resolved
            ConflictRetryError: If the request or listing changed concurrently
        """
        with self.gateway.guard(), self.gateway.atomic():
            swap = self._get_swap(swap_id)
            listing = self._get_listing(swap.listing_id)
            if actor.id not in (swap.requester_id, listing.owner_id):
                raise InsufficientPermissionsError("Only the requester or the owner can cancel this swap")

            if swap.is_resolved:
                raise InvalidTransitionError(f"Swap request is already {swap.status}")

            if swap.status == SwapStatus.ACCEPTED:
                self._transition(listing, ListingStatus.AVAILABLE)
            self._resolve_swap(swap, SwapStatus.DECLINED)
            swap = self._get_swap(swap_id, related=SWAP_RELATED)

        logger.info("Swap request %s cancelled by %s", swap_id, actor.id)
        return swap

    # -- redemption ---------------------------------------------------------

    def redeem(self, listing_id: UUID, redeemer: User) -> Redemption:
        """
        Spend points on a listing.

        The listing transition, the debit, its journal entry and declining
        open swap requests commit together or not at all.

        Raises:
            ListingNotFoundError: If listing doesn't exist
            ListingNotRedeemableError: If listing is not available or has no points value
            OwnerCannotRedeemOwnListingError: If redeemer owns the listing
            InsufficientFundsError: If the balance is below the points value
            ConflictRetryError: If the listing changed concurrently
        """
        with self.gateway.guard(), self.gateway.atomic():
            listing = self._get_listing(listing_id)

            if not listing.is_redeemable:
                raise ListingNotRedeemableError(
                    f"Listing is {listing.status} and cannot be redeemed"
                    if listing.status != ListingStatus.AVAILABLE
                    else "Listing has no points value and can only be swapped"
                )

            if listing.owner_id == redeemer.id:
                raise OwnerCannotRedeemOwnListingError("You cannot redeem your own listing")

            self._transition(listing, ListingStatus.REDEEMED)
            account = points.debit(
                self.gateway,
                user_id=redeemer.id,
                amount=listing.points_value,
                listing=listing,
            )
            self._decline_requests(listing, SwapStatus.OPEN)
            listing = self._get_listing(listing_id, related=LISTING_RELATED)

        logger.info(
            "Listing %s redeemed by %s for %s points",
            listing.pk, redeemer.id, listing.points_value,
        )
        return Redemption(listing=listing, account=account)

    # -- moderation ---------------------------------------------------------

    def moderate(self, listing_id: UUID, action: str, moderator: User) -> Listing:
        """
        Approve or reject a listing (admin only).

        ``approve`` makes a pending_swap or rejected listing available again,
        declining an accepted swap request. ``reject`` takes an available
        listing down, declining open swap requests.

        Raises:
            InsufficientPermissionsError: If moderator is not an admin
            InvalidModerationActionError: If action is unknown
            ListingNotFoundError: If listing doesn't exist
            InvalidTransitionError: If the listing can't move to the target status
            ConflictRetryError: If the listing changed concurrently
        """
        if not moderator.is_moderator:
            raise InsufficientPermissionsError("Only admins can moderate listings")
        if action not in ModerationAction.choices:
            raise InvalidModerationActionError(
                f"Unknown moderation action '{action}'. Use approve or reject."
            )

        with self.gateway.guard(), self.gateway.atomic():
            listing = self._get_listing(listing_id)

            if action == ModerationAction.APPROVE:
                self._transition(listing, ListingStatus.AVAILABLE)
                self._decline_requests(listing, SwapStatus.ACCEPTED)
            else:
                self._transition(listing, ListingStatus.REJECTED)
                self._decline_requests(listing, SwapStatus.OPEN)
            listing = self._get_listing(listing_id, related=LISTING_RELATED)

        logger.info("Listing %s moderated (%s) by %s", listing_id, action, moderator.id)
        return listing

    # -- helpers ------------------------------------------------------------

    def _get_listing(self, listing_id, related=()) -> Listing:
        listing = self.gateway.get(Listing, listing_id, related=related)
        if listing is None:
            raise ListingNotFoundError(f"Listing with ID {listing_id} not found")
        return listing

    def _get_swap(self, swap_id, related=()) -> SwapRequest:
        swap = self.gateway.get(SwapRequest, swap_id, related=related)
        if swap is None:
            raise SwapRequestNotFoundError(f"Swap request with ID {swap_id} not found")
        return swap

    def _get_swap_for_owner(self, swap_id, owner: User):
        swap = self._get_swap(swap_id)
        listing = self._get_listing(swap.listing_id)
        if listing.owner_id != owner.id:
            raise InsufficientPermissionsError("Only the listing owner can resolve swap requests")
        return swap, listing

    @staticmethod
    def _require_swap_status(swap: SwapRequest, status: str) -> None:
        if swap.status != status:
            raise InvalidTransitionError(
                f"Swap request is {swap.status}, expected {status}"
            )

    def _transition(self, listing: Listing, target: str) -> None:
        ListingStateMachine.validate_transition(listing.status, target)
        self._write_listing(listing, {'status': target})

    def _write_listing(self, listing: Listing, changes: dict) -> None:
        written = self.gateway.conditional_write(
            Listing,
            listing.pk,
            expected={'status': listing.status, 'version': listing.version},
            changes=changes,
        )
        if not written:
            logger.warning("Lost race on listing %s at version %s", listing.pk, listing.version)
            raise ConflictRetryError("Listing was changed by someone else. Please try again.")

    def _write_swap(self, swap: SwapRequest, changes: dict) -> None:
        written = self.gateway.conditional_write(
            SwapRequest,
            swap.pk,
            expected={'status': swap.status, 'version': swap.version},
            changes=changes,
        )
        if not written:
            logger.warning("Lost race on swap request %s at version %s", swap.pk, swap.version)
            raise ConflictRetryError("Swap request was changed by someone else. Please try again.")

    def _resolve_swap(self, swap: SwapRequest, status: str) -> None:
        self._write_swap(swap, {'status': status, 'resolved_at': timezone.now()})

    def _decline_requests(self, listing: Listing, status: str) -> None:
        """Decline the listing's unresolved requests in ``status``."""
        requests = self.gateway.query(
            SwapRequest,
            listing_id=listing.pk,
            status=status,
            resolved_at__isnull=True,
        )
        for swap in requests:
            self._resolve_swap(swap, SwapStatus.DECLINED)
