# ==========================================
# apps/exchange/models.py
# ==========================================

from django.db import models
from django.db.models import Q
import uuid


class PointsAccount(models.Model):
    """
    Per-user points balance.

    Created lazily on first reference with a zero balance. The database
    rejects any write that would make the balance negative.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='points_account'
    )
    balance = models.PositiveIntegerField(default=0)
    version = models.PositiveIntegerField(default=0, editable=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'points_accounts'
        constraints = [
            models.CheckConstraint(
                condition=Q(balance__gte=0),
                name='points_balance_non_negative'
            ),
        ]

    def __str__(self):
        return f"{self.user} - {self.balance} pts"


class EntryKind(models.TextChoices):
    DEBIT = 'debit', 'Debit'
    CREDIT = 'credit', 'Credit'


class PointsEntry(models.Model):
    """Append-only journal row for one balance mutation."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    account = models.ForeignKey(
        PointsAccount,
        on_delete=models.CASCADE,
        related_name='entries'
    )
    # Signed: negative for debits
    amount = models.IntegerField()
    kind = models.CharField(max_length=10, choices=EntryKind.choices)
    listing = models.ForeignKey(
        'listings.Listing',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='points_entries'
    )
    granted_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='points_granted'
    )
    note = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'points_entries'
        indexes = [
            models.Index(fields=['account', 'created_at'], name='points_entry_account_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.kind} {self.amount} ({self.account_id})"


class SwapStatus(models.TextChoices):
    OPEN = 'open', 'Open'
    ACCEPTED = 'accepted', 'Accepted'
    DECLINED = 'declined', 'Declined'


class SwapRequest(models.Model):
    """
    A request by another member to swap for a listing.

    At most one request per listing may be open at a time.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    listing = models.ForeignKey(
        'listings.Listing',
        on_delete=models.CASCADE,
        related_name='swap_requests'
    )
    requester = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='swap_requests'
    )
    status = models.CharField(
        max_length=20,
        choices=SwapStatus.choices,
        default=SwapStatus.OPEN
    )
    message = models.TextField(blank=True)
    version = models.PositiveIntegerField(default=0, editable=False)

    created_at = models.DateTimeField(auto_now_add=True)
    resolved_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'swap_requests'
        constraints = [
            models.UniqueConstraint(
                fields=['listing'],
                condition=Q(status='open'),
                name='one_open_swap_per_listing'
            ),
        ]
        indexes = [
            models.Index(fields=['requester', 'created_at'], name='swap_requester_idx'),
            models.Index(fields=['listing', 'status'], name='swap_listing_status_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.requester} -> {self.listing_id} ({self.status})"

    @property
    def is_resolved(self):
        """Declined, or accepted and completed."""
        return self.resolved_at is not None
