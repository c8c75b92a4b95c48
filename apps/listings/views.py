from django.conf import settings
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly, AllowAny
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.common.apps import get_gateway
from apps.common.exceptions import ServiceError
from apps.common.http import service_error_response
from .serializers import (
    ListingSerializer,
    ListingListSerializer,
    ListingWriteSerializer,
    BrowseFilterSerializer,
    CategoryCountSerializer,
)
from .services import (
    browse_listings,
    get_listing_detail,
    get_user_listings,
    get_featured_listings,
    get_category_counts,
    create_listing,
    update_listing,
)


class ListingPagination(PageNumberPagination):
    """Custom pagination for listings."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class ListingViewSet(viewsets.GenericViewSet):
    """
    ViewSet for garment listings.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Browse available listings
    create: List a new garment
    retrieve: Get a listing in any status
    partial_update: Edit listing details (owner only, while available)
    """

    serializer_class = ListingSerializer
    permission_classes = [IsAuthenticatedOrReadOnly]
    pagination_class = ListingPagination
    lookup_value_regex = '[0-9a-f-]{36}'

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action in ['list', 'featured']:
            return ListingListSerializer
        elif self.action in ['create', 'partial_update']:
            return ListingWriteSerializer
        return ListingSerializer

    @extend_schema(
        parameters=[BrowseFilterSerializer],
        responses={200: ListingListSerializer(many=True)},
        description="Browse available listings with optional search and filters.",
        tags=['listings'],
    )
    def list(self, request):
        """Browse available listings."""
        filters = BrowseFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        data = filters.validated_data

        gateway = get_gateway()
        try:
            listings = browse_listings(
                gateway,
                search=data.get('search'),
                category=data.get('category'),
                condition=data.get('condition'),
                size=data.get('size'),
                redeemable_only=data.get('redeemable', False),
            )
            with gateway.guard():
                page = self.paginate_queryset(listings)
        except ServiceError as e:
            return service_error_response(e)

        serializer = ListingListSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    @extend_schema(
        responses={200: ListingSerializer},
        tags=['listings'],
    )
    def retrieve(self, request, pk=None):
        """Get listing details with owner."""
        try:
            listing = get_listing_detail(get_gateway(), listing_id=pk)
        except ServiceError as e:
            return service_error_response(e)

        return Response(ListingSerializer(listing).data)

    @extend_schema(
        request=ListingWriteSerializer,
        responses={201: ListingSerializer},
        tags=['listings'],
    )
    def create(self, request):
        """List a new garment."""
        serializer = ListingWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            listing = create_listing(
                get_gateway(),
                owner=request.user,
                **serializer.validated_data
            )
        except ServiceError as e:
            return service_error_response(e)

        return Response(ListingSerializer(listing).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        request=ListingWriteSerializer,
        responses={200: ListingSerializer},
        tags=['listings'],
    )
    def partial_update(self, request, pk=None):
        """Edit listing details (owner only)."""
        serializer = ListingWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            listing = update_listing(
                get_gateway(),
                listing_id=pk,
                user=request.user,
                **serializer.validated_data
            )
        except ServiceError as e:
            return service_error_response(e)

        return Response(ListingSerializer(listing).data)

    @extend_schema(
        responses={200: ListingSerializer(many=True)},
        description="All listings owned by the current user, in every status.",
        tags=['listings'],
    )
    @action(detail=False, methods=['get'], permission_classes=[IsAuthenticated])
    def mine(self, request):
        """Get the current user's listings (dashboard)."""
        gateway = get_gateway()
        try:
            with gateway.guard():
                listings = list(get_user_listings(gateway, user=request.user))
        except ServiceError as e:
            return service_error_response(e)

        return Response(ListingSerializer(listings, many=True).data)

    @extend_schema(
        responses={200: ListingListSerializer(many=True)},
        description="Newest available listings for the landing page.",
        tags=['listings'],
    )
    @action(detail=False, methods=['get'], permission_classes=[AllowAny])
    def featured(self, request):
        """Get featured listings."""
        gateway = get_gateway()
        try:
            with gateway.guard():
                listings = list(get_featured_listings(gateway, limit=settings.FEATURED_LISTINGS_LIMIT))
        except ServiceError as e:
            return service_error_response(e)

        return Response(ListingListSerializer(listings, many=True).data)

    @extend_schema(
        responses={200: CategoryCountSerializer(many=True)},
        description="Available listing count per category.",
        tags=['listings'],
    )
    @action(detail=False, methods=['get'], permission_classes=[AllowAny])
    def categories(self, request):
        """Get category counts."""
        gateway = get_gateway()
        try:
            with gateway.guard():
                counts = list(get_category_counts(gateway))
        except ServiceError as e:
            return service_error_response(e)

        return Response(CategoryCountSerializer(counts, many=True).data)
