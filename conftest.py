"""
Root conftest — shared pytest fixtures and factory-boy factories.

All fixtures use the ``db`` marker implicitly via ``@pytest.mark.django_db``
on individual tests, or via ``autouse`` where noted.
"""

from unittest.mock import patch

import pytest
from rest_framework.test import APIClient

import factory
from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile

User = get_user_model()

PASSWORD = "TestPass123!"


# ===================================================================
# Factories
# ===================================================================

class UserFactory(factory.django.DjangoModelFactory):
    """Create a User with a hashed password and unique username/email."""

    class Meta:
        model = User
        skip_postgeneration_save = True

    username = factory.Sequence(lambda n: f"testuser{n}")
    email = factory.LazyAttribute(lambda o: f"{o.username}@example.com")
    full_name = factory.Sequence(lambda n: f"Test User {n}")
    avatar = factory.LazyAttribute(
        lambda o: f"https://res.cloudinary.com/test/image/upload/{o.username}.png"
    )
    password = factory.PostGeneration(
        lambda obj, create, extracted, **kw: obj.set_password(extracted or PASSWORD)
        or obj.save()
    )


# ===================================================================
# Fixtures
# ===================================================================

@pytest.fixture
def api_client():
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture
def user(db):
    """A persisted User instance (password: TestPass123!)."""
    return UserFactory()


@pytest.fixture
def other_user(db):
    """A second user for cross-user isolation tests."""
    return UserFactory()


@pytest.fixture
def auth_client(user):
    """Authenticated DRF client for ``user``."""
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def mock_upload():
    """
    Replace Cloudinary uploads made by the registration view.

    Each call returns a URL derived from the folder and file name so tests
    can tell the avatar and cover image apart.
    """
    def fake_upload(image_file, *, folder):
        return f"https://res.cloudinary.com/test/{folder}/{image_file.name}"

    with patch("apps.accounts.views.upload_image", side_effect=fake_upload) as mocked:
        yield mocked


@pytest.fixture
def make_image():
    """Factory for tiny in-memory image uploads."""
    def _make(name="avatar.png", content_type="image/png", content=b"\x89PNG\r\n\x1a\n"):
        return SimpleUploadedFile(name, content, content_type=content_type)

    return _make
