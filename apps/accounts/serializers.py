"""
Serializers for registration input, login input, and the sanitized
user representation returned by every endpoint.

Field names on the wire are camelCase (``fullName``, ``coverImage``);
``source=`` maps them onto the snake_case model attributes.
"""

from django.contrib.auth import get_user_model
from rest_framework import serializers

User = get_user_model()


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------
class RegisterSerializer(serializers.Serializer):
    """
    Text fields of the registration form.

    All four are required and must be non-empty after trimming.
    Uniqueness is deliberately *not* checked here: duplicates are a 409
    conflict raised by the view, not a field validation error.
    """

    fullName = serializers.CharField(source="full_name", max_length=150)
    username = serializers.CharField(max_length=150)
    # Format is not checked; any non-blank string is accepted.
    email = serializers.CharField(max_length=254)
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate_username(self, value):
        return value.lower()

    def validate_email(self, value):
        return value.lower().strip()

    def validate_password(self, value):
        if not value.strip():
            raise serializers.ValidationError("This field may not be blank.")
        return value


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------
class LoginSerializer(serializers.Serializer):
    """
    Login credentials: a password plus ``username`` or ``email``.

    Only shape is validated here; the view performs the lookup so it can
    distinguish "no such user" (404) from "wrong password" (401).
    """

    username = serializers.CharField(required=False, allow_blank=True)
    email = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate_username(self, value):
        return value.lower()

    def validate_email(self, value):
        return value.lower()

    def validate(self, attrs):
        if not attrs.get("username") and not attrs.get("email"):
            raise serializers.ValidationError("username or email is required")
        return attrs


# ---------------------------------------------------------------------------
# Sanitized user
# ---------------------------------------------------------------------------
class UserSerializer(serializers.ModelSerializer):
    """Read-only user view; never exposes ``password`` or ``refresh_token``."""

    fullName = serializers.CharField(source="full_name", read_only=True)
    coverImage = serializers.CharField(source="cover_image", read_only=True)
    createdAt = serializers.DateTimeField(source="date_joined", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "fullName",
            "avatar",
            "coverImage",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = ["id", "username", "email", "avatar"]
