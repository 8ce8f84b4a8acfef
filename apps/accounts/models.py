"""Custom User model with UUID primary key, profile images and session token."""

import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Custom User model extending Django's AbstractUser.

    Uses UUID as primary key (avoids sequential ID enumeration). Username
    and email are both unique and stored lowercased; either one can be used
    to log in. ``refresh_token`` holds the single active session's refresh
    token and is cleared on logout.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, blank=False)
    full_name = models.CharField(max_length=150)
    avatar = models.URLField(
        max_length=500,
        help_text="Cloudinary URL for the user's avatar.",
    )
    cover_image = models.URLField(
        max_length=500,
        blank=True,
        default="",
        help_text="Cloudinary URL for the user's cover image.",
    )
    refresh_token = models.TextField(null=True, blank=True, editable=False)
    updated_at = models.DateTimeField(auto_now=True)

    REQUIRED_FIELDS = ["email", "full_name"]

    class Meta:
        ordering = ["-date_joined"]

    def __str__(self):
        return f"{self.username} ({self.email})"
