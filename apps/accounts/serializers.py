from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""

    member_since = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'display_name',
            'role',
            'is_guest',
            'member_since',
            'last_login',
        ]
        read_only_fields = ['id', 'email', 'role', 'is_guest', 'member_since', 'last_login']


class ProfileSerializer(UserSerializer):
    """Current user's profile with points balance (dashboard)."""

    points = serializers.SerializerMethodField()

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ['points']
        read_only_fields = UserSerializer.Meta.read_only_fields + ['points']

    def get_points(self, obj) -> int:
        from apps.exchange.services import get_balance

        return get_balance(self.context['gateway'], user_id=obj.id)


class UserRegistrationSerializer(serializers.ModelSerializer):
    """Serializer for user registration."""

    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    password_confirm = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )

    class Meta:
        model = User
        fields = ['email', 'password', 'password_confirm', 'display_name']
        extra_kwargs = {
            # Uniqueness is reported by the registration service
            'email': {'validators': []},
        }

    def validate(self, attrs):
        """Validate password confirmation."""
        if attrs['password'] != attrs['password_confirm']:
            raise serializers.ValidationError({
                'password_confirm': 'Passwords do not match'
            })
        return attrs


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class UserPublicSerializer(serializers.ModelSerializer):
    """Public user info (listing owners, swap requesters)."""

    display_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'display_name', 'created_at']
        read_only_fields = fields

    def get_display_name(self, obj) -> str:
        return obj.get_display_name()
