from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsModerator
from apps.common.apps import get_gateway
from apps.common.exceptions import ServiceError
from apps.common.http import service_error_response
from apps.listings.serializers import ListingSerializer
from .serializers import (
    SwapRequestSerializer,
    SwapRequestCreateSerializer,
    ModerationSerializer,
    PointsSummarySerializer,
    PointsAccountSerializer,
    CreditSerializer,
    AdminListingFilterSerializer,
)
from .services import (
    ExchangeLedger,
    get_balance,
    get_history,
    credit,
    get_user_swap_requests,
    get_incoming_swap_requests,
    get_all_accounts,
    get_all_listings,
)


# Response serializers for API documentation
class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()
    code = serializers.CharField()
    retry = serializers.BooleanField(required=False)


class RedeemResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    listing = ListingSerializer()
    balance = serializers.IntegerField()


class CreditResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user_id = serializers.UUIDField()
    balance = serializers.IntegerField()


ERROR_RESPONSES = {
    400: ErrorResponseSerializer,
    403: ErrorResponseSerializer,
    404: ErrorResponseSerializer,
    409: ErrorResponseSerializer,
    503: ErrorResponseSerializer,
}


def _ledger():
    return ExchangeLedger(get_gateway())


# =============================================================================
# LISTING OPERATIONS
# =============================================================================

@extend_schema(
    request=None,
    responses={200: RedeemResponseSerializer, **ERROR_RESPONSES},
    description="Redeem an available listing with points. Debits the listing's points value.",
    tags=['exchange'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def redeem_listing(request, listing_id):
    """Redeem a listing with points."""
    try:
        redemption = _ledger().redeem(listing_id, request.user)
    except ServiceError as e:
        return service_error_response(e)

    return Response({
        'message': f'You redeemed {redemption.listing.title}.',
        'listing': ListingSerializer(redemption.listing).data,
        'balance': redemption.account.balance,
    })


@extend_schema(
    request=SwapRequestCreateSerializer,
    responses={201: SwapRequestSerializer, **ERROR_RESPONSES},
    description="Request a swap for an available listing.",
    tags=['exchange'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def request_swap(request, listing_id):
    """Open a swap request on a listing."""
    serializer = SwapRequestCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        swap = _ledger().request_swap(
            listing_id,
            request.user,
            message=serializer.validated_data['message'],
        )
    except ServiceError as e:
        return service_error_response(e)

    return Response(SwapRequestSerializer(swap).data, status=status.HTTP_201_CREATED)


@extend_schema(
    request=ModerationSerializer,
    responses={200: ListingSerializer, **ERROR_RESPONSES},
    description="Approve or reject a listing (admin only).",
    tags=['exchange', 'admin'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def moderate_listing(request, listing_id):
    """Approve or reject a listing."""
    serializer = ModerationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        listing = _ledger().moderate(
            listing_id,
            serializer.validated_data['action'],
            request.user,
        )
    except ServiceError as e:
        return service_error_response(e)

    return Response(ListingSerializer(listing).data)


# =============================================================================
# SWAP REQUESTS
# =============================================================================

@extend_schema(
    responses={200: SwapRequestSerializer(many=True)},
    description="Swap requests the current user has made.",
    tags=['exchange'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_swap_requests(request):
    """List swap requests made by the current user."""
    gateway = get_gateway()
    try:
        with gateway.guard():
            swaps = list(get_user_swap_requests(gateway, user=request.user))
    except ServiceError as e:
        return service_error_response(e)

    return Response(SwapRequestSerializer(swaps, many=True).data)


@extend_schema(
    responses={200: SwapRequestSerializer(many=True)},
    description="Swap requests on the current user's listings.",
    tags=['exchange'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def incoming_swap_requests(request):
    """List swap requests on the current user's listings."""
    gateway = get_gateway()
    try:
        with gateway.guard():
            swaps = list(get_incoming_swap_requests(gateway, owner=request.user))
    except ServiceError as e:
        return service_error_response(e)

    return Response(SwapRequestSerializer(swaps, many=True).data)


def _resolve_swap_view(method_name, description):
    """Build a POST view that applies one ledger swap operation."""

    @extend_schema(
        request=None,
        responses={200: SwapRequestSerializer, **ERROR_RESPONSES},
        description=description,
        tags=['exchange'],
    )
    @api_view(['POST'])
    @permission_classes([IsAuthenticated])
    def view(request, swap_id):
        try:
            swap = getattr(_ledger(), method_name)(swap_id, request.user)
        except ServiceError as e:
            return service_error_response(e)

        return Response(SwapRequestSerializer(swap).data)

    view.__name__ = f'{method_name}_view'
    return view


accept_swap = _resolve_swap_view(
    'accept_swap',
    "Accept an open swap request on your listing. The listing becomes pending_swap.",
)
decline_swap = _resolve_swap_view(
    'decline_swap',
    "Decline an open swap request on your listing.",
)
complete_swap = _resolve_swap_view(
    'complete_swap',
    "Confirm an accepted swap. The listing becomes swapped.",
)
cancel_swap = _resolve_swap_view(
    'cancel_swap',
    "Back out of a swap request (requester or owner).",
)


# =============================================================================
# POINTS
# =============================================================================

@extend_schema(
    responses={200: PointsSummarySerializer},
    description="Current user's points balance and history.",
    tags=['points'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_points(request):
    """Get balance and history for the current user."""
    gateway = get_gateway()
    try:
        balance = get_balance(gateway, user_id=request.user.id)
        with gateway.guard():
            history = list(get_history(gateway, user_id=request.user.id))
    except ServiceError as e:
        return service_error_response(e)

    return Response(PointsSummarySerializer({'balance': balance, 'history': history}).data)


@extend_schema(
    request=CreditSerializer,
    responses={200: CreditResponseSerializer, **ERROR_RESPONSES},
    description="Grant points to a user (admin only).",
    tags=['points', 'admin'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def credit_points(request, user_id):
    """Grant points to a user."""
    serializer = CreditSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        account = credit(
            get_gateway(),
            user_id=user_id,
            amount=serializer.validated_data['amount'],
            granted_by=request.user,
            note=serializer.validated_data['note'],
        )
    except ServiceError as e:
        return service_error_response(e)

    return Response({
        'message': f"Granted {serializer.validated_data['amount']} points.",
        'user_id': account.user_id,
        'balance': account.balance,
    })


# =============================================================================
# ADMIN PANEL
# =============================================================================

@extend_schema(
    responses={200: PointsAccountSerializer(many=True)},
    description="All points accounts (admin only).",
    tags=['admin'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsModerator])
def admin_accounts(request):
    """List every points account."""
    gateway = get_gateway()
    try:
        with gateway.guard():
            accounts = list(get_all_accounts(gateway))
    except ServiceError as e:
        return service_error_response(e)

    return Response(PointsAccountSerializer(accounts, many=True).data)


@extend_schema(
    parameters=[AdminListingFilterSerializer],
    responses={200: ListingSerializer(many=True)},
    description="Listings in every status, optionally filtered by status (admin only).",
    tags=['admin'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsModerator])
def admin_listings(request):
    """List listings for moderation."""
    filters = AdminListingFilterSerializer(data=request.query_params)
    filters.is_valid(raise_exception=True)

    gateway = get_gateway()
    try:
        with gateway.guard():
            listings = list(get_all_listings(gateway, status=filters.validated_data.get('status')))
    except ServiceError as e:
        return service_error_response(e)

    return Response(ListingSerializer(listings, many=True).data)
