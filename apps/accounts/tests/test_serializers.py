"""Tests for accounts serializers."""

import pytest
from django.contrib.auth import get_user_model

from apps.accounts.serializers import LoginSerializer, RegisterSerializer, UserSerializer

User = get_user_model()


class TestRegisterSerializer:
    """Registration field validation (no database needed)."""

    VALID_DATA = {
        "fullName": "Alice Liddell",
        "username": "Alice",
        "email": "  Alice@Example.COM ",
        "password": "wonderland",
    }

    def test_valid_data_normalised(self):
        s = RegisterSerializer(data=self.VALID_DATA)
        assert s.is_valid(), s.errors
        assert s.validated_data["username"] == "alice"
        assert s.validated_data["email"] == "alice@example.com"
        assert s.validated_data["full_name"] == "Alice Liddell"

    @pytest.mark.parametrize("field", ["fullName", "username", "email", "password"])
    def test_blank_field_rejected(self, field):
        s = RegisterSerializer(data={**self.VALID_DATA, field: "   "})
        assert not s.is_valid()
        assert field in s.errors

    @pytest.mark.parametrize("field", ["fullName", "username", "email", "password"])
    def test_missing_field_rejected(self, field):
        data = {k: v for k, v in self.VALID_DATA.items() if k != field}
        s = RegisterSerializer(data=data)
        assert not s.is_valid()
        assert field in s.errors

    def test_email_format_not_enforced(self):
        s = RegisterSerializer(data={**self.VALID_DATA, "email": " Bob "})
        assert s.is_valid(), s.errors
        assert s.validated_data["email"] == "bob"


class TestLoginSerializer:
    """Login input shape."""

    def test_username_only(self):
        s = LoginSerializer(data={"username": "Alice", "password": "x"})
        assert s.is_valid(), s.errors
        assert s.validated_data["username"] == "alice"

    def test_email_only(self):
        s = LoginSerializer(data={"email": "ALICE@example.com", "password": "x"})
        assert s.is_valid(), s.errors
        assert s.validated_data["email"] == "alice@example.com"

    def test_identifier_required(self):
        s = LoginSerializer(data={"password": "x"})
        assert not s.is_valid()
        assert "non_field_errors" in s.errors

    def test_password_required(self):
        s = LoginSerializer(data={"username": "alice"})
        assert not s.is_valid()
        assert "password" in s.errors


@pytest.mark.django_db
class TestUserSerializer:
    """Sanitized representation."""

    def test_hides_secrets(self, user):
        user.refresh_token = "stored-token"
        user.save()
        data = UserSerializer(user).data
        assert data["username"] == user.username
        assert data["fullName"] == user.full_name
        assert data["avatar"] == user.avatar
        assert data["coverImage"] == ""
        assert "password" not in data
        assert "refresh_token" not in data
        assert "refreshToken" not in data
