from rest_framework import serializers

from apps.accounts.serializers import UserPublicSerializer
from apps.listings.serializers import ListingListSerializer
from apps.listings.models import ListingStatus
from .models import PointsAccount, PointsEntry, SwapRequest
from .services import ModerationAction


class SwapRequestSerializer(serializers.ModelSerializer):
    """Swap request with the listing and requester."""

    listing = ListingListSerializer(read_only=True)
    requester = UserPublicSerializer(read_only=True)

    class Meta:
        model = SwapRequest
        fields = [
            'id',
            'listing',
            'requester',
            'status',
            'message',
            'created_at',
            'resolved_at',
        ]
        read_only_fields = fields


class SwapRequestCreateSerializer(serializers.Serializer):
    message = serializers.CharField(required=False, allow_blank=True, max_length=1000, default='')


class ModerationSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=ModerationAction.choices)


class PointsEntrySerializer(serializers.ModelSerializer):
    listing_title = serializers.CharField(source='listing.title', read_only=True, default=None)

    class Meta:
        model = PointsEntry
        fields = ['id', 'amount', 'kind', 'listing', 'listing_title', 'note', 'created_at']
        read_only_fields = fields


class PointsSummarySerializer(serializers.Serializer):
    """Balance plus journal for the current user."""

    balance = serializers.IntegerField()
    history = PointsEntrySerializer(many=True)


class PointsAccountSerializer(serializers.ModelSerializer):
    """Account row for the admin panel."""

    user = UserPublicSerializer(read_only=True)
    email = serializers.EmailField(source='user.email', read_only=True)
    role = serializers.CharField(source='user.role', read_only=True)

    class Meta:
        model = PointsAccount
        fields = ['id', 'user', 'email', 'role', 'balance', 'updated_at']
        read_only_fields = fields


class CreditSerializer(serializers.Serializer):
    amount = serializers.IntegerField(min_value=1)
    note = serializers.CharField(required=False, allow_blank=True, max_length=255, default='')


class AdminListingFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=ListingStatus.choices,
        required=False,
    )
