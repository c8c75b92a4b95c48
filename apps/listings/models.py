# ==========================================
# apps/listings/models.py
# ==========================================

from django.core.validators import MinValueValidator
from django.db import models
import uuid


class ListingStatus(models.TextChoices):
    AVAILABLE = 'available', 'Available'
    PENDING_SWAP = 'pending_swap', 'Pending swap'
    SWAPPED = 'swapped', 'Swapped'
    REDEEMED = 'redeemed', 'Redeemed'
    REJECTED = 'rejected', 'Rejected'


class Category(models.TextChoices):
    TOPS = 'Tops', 'Tops'
    BOTTOMS = 'Bottoms', 'Bottoms'
    DRESSES = 'Dresses', 'Dresses'
    OUTERWEAR = 'Outerwear', 'Outerwear'
    ACCESSORIES = 'Accessories', 'Accessories'
    FOOTWEAR = 'Footwear', 'Footwear'


class Condition(models.TextChoices):
    NEW_WITH_TAGS = 'New with tags', 'New with tags'
    EXCELLENT = 'Excellent', 'Excellent'
    GOOD = 'Good', 'Good'
    FAIR = 'Fair', 'Fair'


class Listing(models.Model):
    """
    A garment offered for swap or point redemption.

    ``status`` and ``version`` are owned by the exchange ledger. Code outside
    the ledger must not write them; the ledger changes them with conditional
    updates that check and bump ``version``.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='listings'
    )

    # Garment details
    title = models.CharField(max_length=200)
    description = models.TextField()
    category = models.CharField(max_length=20, choices=Category.choices)
    garment_type = models.CharField(max_length=100)
    size = models.CharField(max_length=50)
    condition = models.CharField(max_length=20, choices=Condition.choices)
    tags = models.JSONField(default=list, blank=True)
    images = models.JSONField(default=list, blank=True)

    # Null means swap-only
    points_value = models.PositiveIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(0)]
    )

    # Exchange state
    status = models.CharField(
        max_length=20,
        choices=ListingStatus.choices,
        default=ListingStatus.AVAILABLE,
        editable=False
    )
    version = models.PositiveIntegerField(default=0, editable=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'listings'
        indexes = [
            models.Index(fields=['status', 'created_at'], name='listings_status_idx'),
            models.Index(fields=['owner', 'created_at'], name='listings_owner_idx'),
            models.Index(fields=['category', 'status'], name='listings_category_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.title} ({self.status})"

    @property
    def is_redeemable(self):
        """Whether the listing can currently be redeemed with points."""
        return (
            self.status == ListingStatus.AVAILABLE
            and self.points_value is not None
            and self.points_value > 0
        )

    @property
    def is_swap_only(self):
        return self.points_value is None
