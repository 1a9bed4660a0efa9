"""
Serializers for the identity REST surface.

This module provides DRF serializers for:
- User model (public read representation)
- Registration and login payloads
- Friendship mutation payloads

Related files:
    - models.py: User model
    - views.py: Views that use these serializers
    - services.py: IdentityService for the underlying operations

Security:
    - Password fields are write-only
    - The public user representation never exposes role or password data
"""

from rest_framework import serializers

from authentication.models import User


class UserSerializer(serializers.ModelSerializer):
    """
    Public representation of a user.

    Returned by /auth/me/, login, registration and user search.
    """

    class Meta:
        model = User
        fields = ["id", "username", "display_name"]
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    """Registration payload."""

    username = serializers.CharField(max_length=150, trim_whitespace=False)
    password = serializers.CharField(write_only=True, trim_whitespace=False)
    display_name = serializers.CharField(
        max_length=150, required=False, allow_blank=True, default=""
    )


class LoginSerializer(serializers.Serializer):
    """Login payload."""

    username = serializers.CharField(max_length=150, trim_whitespace=False)
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class FriendRequestSerializer(serializers.Serializer):
    """Payload naming the other side of a friendship mutation."""

    username = serializers.CharField(max_length=150, trim_whitespace=False)

