"""
Points account service.

Balances are only changed with conditional updates, so two concurrent
debits can never take an account below zero. Every change appends a
PointsEntry to the account's journal.
"""

import logging
from typing import Optional
from uuid import UUID

from django.db import IntegrityError
from django.db.models import F, QuerySet

from apps.accounts.models import User
from apps.common.exceptions import InsufficientFundsError
from apps.common.gateway import DocumentGateway
from apps.exchange.models import PointsAccount, PointsEntry, EntryKind
from apps.listings.models import Listing

from .exceptions import InvalidAmountError, InsufficientPermissionsError, AccountNotFoundError

logger = logging.getLogger(__name__)


def _validate_amount(amount) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmountError("Amount must be a positive whole number of points")


def get_or_create_account(gateway: DocumentGateway, *, user_id: UUID) -> PointsAccount:
    """
    Return the user's points account, creating an empty one on first reference.

    A concurrent first reference loses on the unique ``user`` column and
    reads the winner's row instead.
    """
    account = gateway.query(PointsAccount, user_id=user_id).first()
    if account is not None:
        return account

    try:
        with gateway.atomic():
            return gateway.create(PointsAccount, user_id=user_id, balance=0)
    except IntegrityError:
        return gateway.query(PointsAccount, user_id=user_id).get()


def get_balance(gateway: DocumentGateway, *, user_id: UUID) -> int:
    """Current balance of the user's account (0 for a new user)."""
    with gateway.guard():
        return get_or_create_account(gateway, user_id=user_id).balance


def debit(
    gateway: DocumentGateway,
    *,
    user_id: UUID,
    amount: int,
    listing: Optional[Listing] = None,
) -> PointsAccount:
    """
    Take ``amount`` points from the user's account.

    Must be called inside the transaction that changes the listing, so the
    debit is never visible on its own.

    Args:
        gateway: Document gateway to write through
        user_id: Account owner
        amount: Points to take (positive)
        listing: Listing the points are spent on, recorded in the journal

    Returns:
        Updated PointsAccount

    Raises:
        InvalidAmountError: If amount is not positive
        InsufficientFundsError: If the balance is lower than amount
    """
    _validate_amount(amount)

    with gateway.atomic():
        account = get_or_create_account(gateway, user_id=user_id)

        written = gateway.conditional_write(
            PointsAccount,
            account.pk,
            expected={'balance__gte': amount},
            changes={'balance': F('balance') - amount},
        )
        if not written:
            raise InsufficientFundsError(
                f"Insufficient points: {amount} needed"
            )

        gateway.create(
            PointsEntry,
            account=account,
            amount=-amount,
            kind=EntryKind.DEBIT,
            listing=listing,
            note=f"Redeemed {listing.title}" if listing is not None else '',
        )

    return gateway.get(PointsAccount, account.pk)


def credit(
    gateway: DocumentGateway,
    *,
    user_id: UUID,
    amount: int,
    granted_by: User,
    note: str = '',
) -> PointsAccount:
    """
    Grant ``amount`` points to the user's account (admin only).

    Raises:
        InsufficientPermissionsError: If granted_by is not an admin
        InvalidAmountError: If amount is not positive
        AccountNotFoundError: If the user doesn't exist
    """
    if not granted_by.is_moderator:
        raise InsufficientPermissionsError("Only admins can grant points")
    _validate_amount(amount)

    with gateway.guard(), gateway.atomic():
        if gateway.get(User, user_id) is None:
            raise AccountNotFoundError(f"User with ID {user_id} not found")

        account = get_or_create_account(gateway, user_id=user_id)

        gateway.conditional_write(
            PointsAccount,
            account.pk,
            expected={},
            changes={'balance': F('balance') + amount},
        )
        gateway.create(
            PointsEntry,
            account=account,
            amount=amount,
            kind=EntryKind.CREDIT,
            granted_by=granted_by,
            note=note,
        )

    logger.info("Credited %s points to %s (granted by %s)", amount, user_id, granted_by.id)
    return gateway.get(PointsAccount, account.pk)


def get_history(gateway: DocumentGateway, *, user_id: UUID) -> QuerySet:
    """Journal entries for the user's account, newest first."""
    return (
        gateway.query(PointsEntry, account__user_id=user_id)
        .select_related('listing', 'granted_by')
        .order_by('-created_at')
    )
