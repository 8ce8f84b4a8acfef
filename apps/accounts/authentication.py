"""
DRF authentication backed by the ``accessToken`` cookie.

Browsers send the HttpOnly cookie set at login; API clients may instead
send ``Authorization: Bearer <token>``.  Requests without either are
left anonymous so each view's permission classes decide what to do.
"""

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework_simplejwt.settings import api_settings

from .exceptions import UnauthorizedError
from .tokens import ACCESS, decode_token


class AccessTokenAuthentication(BaseAuthentication):
    """Resolve ``request.user`` from a signed access token."""

    www_authenticate_realm = "api"

    def get_raw_token(self, request):
        token = request.COOKIES.get(settings.ACCESS_TOKEN_COOKIE)
        if token:
            return token

        parts = get_authorization_header(request).split()
        if len(parts) != 2:
            return None
        header_type, raw = parts
        if header_type.decode("latin-1") not in api_settings.AUTH_HEADER_TYPES:
            return None
        return raw.decode("latin-1")

    def authenticate(self, request):
        token = self.get_raw_token(request)
        if not token:
            return None

        try:
            payload = decode_token(token, ACCESS)
        except UnauthorizedError:
            raise UnauthorizedError("Invalid access token")

        User = get_user_model()
        try:
            user = User.objects.get(pk=payload[api_settings.USER_ID_CLAIM])
        except (User.DoesNotExist, DjangoValidationError):
            raise UnauthorizedError("Invalid access token")

        if not user.is_active:
            raise UnauthorizedError("User account is disabled")

        return user, token

    def authenticate_header(self, request):
        return f'Bearer realm="{self.www_authenticate_realm}"'
