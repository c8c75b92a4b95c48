from rest_framework import status, generics, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema

from apps.common.exceptions import ServiceError
from apps.common.http import service_error_response
from apps.common.apps import get_gateway
from .models import User
from .serializers import (
    UserRegistrationSerializer,
    UserLoginSerializer,
    UserSerializer,
    ProfileSerializer,
    UserPublicSerializer,
)
from .services import (
    register_user,
    authenticate_user,
    sign_in_anonymously,
    AccountsServiceError,
)


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()
    code = serializers.CharField()


class LogoutRequestSerializer(serializers.Serializer):
    refresh = serializers.CharField(help_text="Refresh token to invalidate")


def _auth_response(user, message, http_status=status.HTTP_200_OK):
    """Build the user + JWT pair response shared by all sign-in flows."""
    refresh = RefreshToken.for_user(user)
    return Response({
        'message': message,
        'user': UserSerializer(user).data,
        'tokens': {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
        }
    }, status=http_status)


@extend_schema(
    request=UserRegistrationSerializer,
    responses={
        201: AuthResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Register a new member account and receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Register a new user account."""
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = register_user(
            email=serializer.validated_data['email'],
            password=serializer.validated_data['password'],
            display_name=serializer.validated_data.get('display_name', ''),
        )
    except AccountsServiceError as e:
        return service_error_response(e)

    return _auth_response(user, 'Registration successful.', status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
        503: ErrorResponseSerializer,
    },
    description="Authenticate with email and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with email and password."""
    serializer = UserLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = authenticate_user(
            get_gateway(),
            email=serializer.validated_data['email'],
            password=serializer.validated_data['password'],
        )
    except ServiceError as e:
        return service_error_response(e)

    return _auth_response(user, 'Login successful')


@extend_schema(
    request=None,
    responses={201: AuthResponseSerializer},
    description="Sign in as an anonymous guest and receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def anonymous_login(request):
    """Create a guest account for anonymous use."""
    user = sign_in_anonymously()
    return _auth_response(user, 'Signed in as guest', status.HTTP_201_CREATED)


@extend_schema(
    request=LogoutRequestSerializer,
    responses={
        200: MessageResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Logout. The refresh token, if given, must be valid.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """Logout and validate the refresh token."""
    refresh_token = request.data.get('refresh')
    if refresh_token:
        try:
            RefreshToken(refresh_token)
        except TokenError:
            return Response({
                'error': 'Invalid token',
                'code': 'invalid_token',
            }, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'message': 'Logout successful'
    })


@extend_schema(
    responses={200: ProfileSerializer},
    description="Get the current user's profile with points balance.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Get current authenticated user profile."""
    serializer = ProfileSerializer(request.user, context={'gateway': get_gateway()})
    try:
        data = serializer.data
    except ServiceError as e:
        return service_error_response(e)
    return Response(data)


@extend_schema(
    request=UserSerializer,
    responses={
        200: UserSerializer,
        400: ErrorResponseSerializer,
    },
    description="Update the current user's display name.",
    tags=['auth'],
)
@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def update_profile(request):
    """Update user profile."""
    serializer = UserSerializer(request.user, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    serializer.save()
    return Response(serializer.data)


class UserDetailView(generics.RetrieveAPIView):
    """
    Get public user profile by ID.

    GET /api/auth/users/{id}/
    """
    queryset = User.objects.filter(is_active=True)
    serializer_class = UserPublicSerializer
