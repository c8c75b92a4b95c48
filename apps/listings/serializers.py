from django.conf import settings
from rest_framework import serializers

from apps.accounts.serializers import UserPublicSerializer
from .models import Listing, Category, Condition


class TagsField(serializers.Field):
    """Accepts a comma-separated string or a list, always returns a list."""

    def to_internal_value(self, data):
        if isinstance(data, str):
            return data
        if isinstance(data, list) and all(isinstance(tag, str) for tag in data):
            return data
        raise serializers.ValidationError('Tags must be a comma-separated string or a list of strings.')

    def to_representation(self, value):
        return list(value)


class ListingSerializer(serializers.ModelSerializer):
    """Full listing representation (detail, dashboard, admin panel)."""

    owner = UserPublicSerializer(read_only=True)
    is_redeemable = serializers.BooleanField(read_only=True)

    class Meta:
        model = Listing
        fields = [
            'id',
            'owner',
            'title',
            'description',
            'category',
            'garment_type',
            'size',
            'condition',
            'tags',
            'images',
            'points_value',
            'status',
            'version',
            'is_redeemable',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ListingListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for browse cards."""

    cover_image = serializers.SerializerMethodField()

    class Meta:
        model = Listing
        fields = [
            'id',
            'title',
            'description',
            'category',
            'size',
            'condition',
            'points_value',
            'status',
            'cover_image',
            'created_at',
        ]
        read_only_fields = fields

    def get_cover_image(self, obj):
        return obj.images[0] if obj.images else None


class ListingWriteSerializer(serializers.Serializer):
    """Input for creating or editing a listing."""

    title = serializers.CharField(max_length=200)
    description = serializers.CharField()
    category = serializers.ChoiceField(choices=Category.choices)
    garment_type = serializers.CharField(max_length=100)
    size = serializers.CharField(max_length=50)
    condition = serializers.ChoiceField(choices=Condition.choices)
    tags = TagsField(required=False)
    images = serializers.ListField(
        child=serializers.URLField(max_length=500),
        required=False,
    )
    points_value = serializers.IntegerField(min_value=0, required=False, allow_null=True)

    def validate_images(self, value):
        if len(value) > settings.LISTING_MAX_IMAGES:
            raise serializers.ValidationError(
                f'You can upload a maximum of {settings.LISTING_MAX_IMAGES} images.'
            )
        return value


class BrowseFilterSerializer(serializers.Serializer):
    """Query parameters for browsing listings."""

    search = serializers.CharField(required=False, allow_blank=True)
    category = serializers.ChoiceField(choices=Category.choices, required=False)
    condition = serializers.ChoiceField(choices=Condition.choices, required=False)
    size = serializers.CharField(required=False, allow_blank=True)
    redeemable = serializers.BooleanField(required=False, default=False)


class CategoryCountSerializer(serializers.Serializer):
    category = serializers.CharField()
    count = serializers.IntegerField()
