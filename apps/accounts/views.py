"""
Views for user registration, login, logout and access-token refresh.

Every endpoint answers with the ``ApiResponse`` envelope; failures are
raised as ``ApiError`` subclasses and rendered by the project's DRF
exception handler.  Token issuing lives in ``tokens`` and Cloudinary
uploads in ``cloudinary_utils`` so views stay thin.
"""

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.db.models import Q

from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView
from rest_framework_simplejwt.settings import api_settings

from .cloudinary_utils import (
    AVATAR_FOLDER,
    COVER_IMAGE_FOLDER,
    ImageValidationError,
    upload_image,
    validate_image,
)
from .exceptions import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    ServerError,
    UnauthorizedError,
)
from .responses import ApiResponse
from .serializers import LoginSerializer, RegisterSerializer, UserSerializer
from .tokens import REFRESH, decode_token, generate_access_and_refresh_tokens

User = get_user_model()
logger = logging.getLogger(__name__)

# Cookie expiry used to make browsers drop a cookie immediately.
EXPIRED = "Thu, 01 Jan 1970 00:00:00 GMT"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def first_uploaded_file(request, field):
    """Return the first file attached under ``field``, or ``None``."""
    files = request.FILES.getlist(field)
    return files[0] if files else None


def _cookie_options():
    return {
        "httponly": True,
        "secure": settings.AUTH_COOKIE_SECURE,
        "samesite": settings.AUTH_COOKIE_SAMESITE,
    }


def set_auth_cookies(response, access_token, refresh_token):
    response.set_cookie(settings.ACCESS_TOKEN_COOKIE, access_token, **_cookie_options())
    response.set_cookie(settings.REFRESH_TOKEN_COOKIE, refresh_token, **_cookie_options())
    return response


def clear_auth_cookies(response):
    for name in (settings.ACCESS_TOKEN_COOKIE, settings.REFRESH_TOKEN_COOKIE):
        response.set_cookie(name, "", max_age=0, expires=EXPIRED, **_cookie_options())
    return response


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------
class RegisterView(APIView):
    """
    POST /api/v1/users/register/

    Multipart form: ``fullName``, ``username``, ``email``, ``password``,
    ``avatar`` (required file) and ``coverImage`` (optional file).
    Uploads the images to Cloudinary and creates the account.
    """

    authentication_classes = []
    permission_classes = [AllowAny]
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        if not serializer.is_valid():
            raise BadRequestError("All fields are required", errors=serializer.errors)
        data = serializer.validated_data

        if User.objects.filter(
            Q(username=data["username"]) | Q(email=data["email"])
        ).exists():
            raise ConflictError("User with email or username already exists")

        avatar_file = first_uploaded_file(request, "avatar")
        if avatar_file is None:
            raise BadRequestError("Avatar file is required")
        try:
            validate_image(avatar_file)
        except ImageValidationError as exc:
            raise BadRequestError(str(exc))

        # The cover image is optional: a bad file is dropped, not fatal.
        cover_file = first_uploaded_file(request, "coverImage")
        if cover_file is not None:
            try:
                validate_image(cover_file)
            except ImageValidationError as exc:
                logger.warning("Ignoring cover image: %s", exc)
                cover_file = None

        try:
            avatar_url = upload_image(avatar_file, folder=AVATAR_FOLDER)
        except (ImageValidationError, RuntimeError):
            raise ServerError("Failed to upload avatar image")

        cover_image_url = ""
        if cover_file is not None:
            try:
                cover_image_url = upload_image(cover_file, folder=COVER_IMAGE_FOLDER)
            except (ImageValidationError, RuntimeError):
                logger.warning("Cover image upload failed; continuing without it")

        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    username=data["username"],
                    email=data["email"],
                    password=data["password"],
                    full_name=data["full_name"],
                    avatar=avatar_url,
                    cover_image=cover_image_url,
                )
        except IntegrityError:
            raise ConflictError("User with email or username already exists")

        created_user = (
            User.objects.defer("password", "refresh_token").filter(pk=user.pk).first()
        )
        if created_user is None:
            raise ServerError("Something went wrong while registering the user")

        logger.info("Registered user %s", created_user.username)
        return ApiResponse(
            UserSerializer(created_user).data,
            "User registered successfully",
            status=status.HTTP_201_CREATED,
        )


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------
class LoginView(APIView):
    """
    POST /api/v1/users/login/

    Authenticates ``username`` or ``email`` plus ``password``, starts a
    new session and returns the token pair both as cookies and in the body.
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            if "password" in serializer.errors:
                raise BadRequestError("Password is required", errors=serializer.errors)
            raise BadRequestError("username or email is required", errors=serializer.errors)
        username = serializer.validated_data.get("username")
        email = serializer.validated_data.get("email")
        password = serializer.validated_data["password"]

        lookup = Q()
        if username:
            lookup |= Q(username=username)
        if email:
            lookup |= Q(email=email)
        user = User.objects.filter(lookup).first()
        if user is None:
            raise NotFoundError("User does not exist")

        if not user.check_password(password):
            raise UnauthorizedError("Invalid user credentials")

        access_token, refresh_token = generate_access_and_refresh_tokens(user.pk)
        logger.info("User %s logged in", user.username)

        response = ApiResponse(
            {
                "user": UserSerializer(user).data,
                "accessToken": access_token,
                "refreshToken": refresh_token,
            },
            "User logged in successfully",
        )
        return set_auth_cookies(response, access_token, refresh_token)


# ---------------------------------------------------------------------------
# Logout
# ---------------------------------------------------------------------------
class LogoutView(APIView):
    """
    POST /api/v1/users/logout/

    Ends the caller's session: the stored refresh token is cleared and
    both auth cookies are expired.
    """

    permission_classes = [IsAuthenticated]

    def post(self, request):
        User.objects.filter(pk=request.user.pk).update(refresh_token=None)
        logger.info("User %s logged out", request.user.username)

        return clear_auth_cookies(ApiResponse({}, "User logged out"))


# ---------------------------------------------------------------------------
# Refresh
# ---------------------------------------------------------------------------
class RefreshTokenView(APIView):
    """
    POST /api/v1/users/refresh-token/

    Exchanges the current refresh token (cookie, or ``refreshToken`` in the
    body) for a new token pair.  Only the token most recently issued to the
    account is accepted, so a token is single-use.
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        incoming = request.COOKIES.get(settings.REFRESH_TOKEN_COOKIE)
        if not incoming and isinstance(request.data, dict):
            incoming = request.data.get("refreshToken")
        if not incoming:
            raise UnauthorizedError("Unauthorized request")

        payload = decode_token(incoming, REFRESH)

        try:
            user = User.objects.get(pk=payload[api_settings.USER_ID_CLAIM])
        except (User.DoesNotExist, DjangoValidationError):
            raise UnauthorizedError("Invalid refresh token")

        if incoming != user.refresh_token:
            logger.warning("Rejected stale refresh token for user %s", user.username)
            raise UnauthorizedError("Refresh token is expired or used")

        access_token, refresh_token = generate_access_and_refresh_tokens(user.pk)
        logger.info("Rotated tokens for user %s", user.username)

        response = ApiResponse(
            {"accessToken": access_token, "refreshToken": refresh_token},
            "Access token refreshed",
        )
        return set_auth_cookies(response, access_token, refresh_token)
