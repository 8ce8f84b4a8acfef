"""
Access/refresh token issuing and verification.

Both token kinds are HS256 JWTs produced by SimpleJWT's ``TokenBackend``
but signed with *different* secrets (``ACCESS_TOKEN_SECRET`` and
``REFRESH_TOKEN_SECRET``), so a leaked access token can never be replayed
against the refresh endpoint.  Each token carries a random ``jti`` which
keeps tokens minted within the same second distinct.

The refresh token is also stored on the user row; only the stored value
is accepted by the refresh endpoint, which makes every rotation
invalidate the previous token.
"""

import logging
import uuid

from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework_simplejwt.backends import TokenBackend
from rest_framework_simplejwt.exceptions import TokenBackendError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.utils import aware_utcnow, datetime_to_epoch

from .exceptions import ServerError, UnauthorizedError

logger = logging.getLogger(__name__)

ACCESS = "access"
REFRESH = "refresh"


def _backend(token_type):
    secret = (
        settings.ACCESS_TOKEN_SECRET
        if token_type == ACCESS
        else settings.REFRESH_TOKEN_SECRET
    )
    return TokenBackend(api_settings.ALGORITHM, signing_key=secret)


def _base_claims(user, token_type, lifetime):
    now = aware_utcnow()
    return {
        api_settings.TOKEN_TYPE_CLAIM: token_type,
        api_settings.USER_ID_CLAIM: str(user.pk),
        "iat": datetime_to_epoch(now),
        "exp": datetime_to_epoch(now + lifetime),
        api_settings.JTI_CLAIM: uuid.uuid4().hex,
    }


def generate_access_token(user):
    """Short-lived token embedding the user's identity claims."""
    payload = _base_claims(user, ACCESS, api_settings.ACCESS_TOKEN_LIFETIME)
    payload.update(
        {
            "email": user.email,
            "username": user.username,
            "full_name": user.full_name,
        }
    )
    return _backend(ACCESS).encode(payload)


def generate_refresh_token(user):
    """Long-lived token embedding only the user id."""
    payload = _base_claims(user, REFRESH, api_settings.REFRESH_TOKEN_LIFETIME)
    return _backend(REFRESH).encode(payload)


def decode_token(token, token_type):
    """
    Verify ``token`` with the secret for ``token_type`` and return its payload.

    Raises
    ------
    UnauthorizedError
        With SimpleJWT's reason when the signature or expiry check fails,
        or when the token was issued for the other token type.
    """
    try:
        payload = _backend(token_type).decode(token, verify=True)
    except TokenBackendError as exc:
        raise UnauthorizedError(str(exc)) from exc

    if payload.get(api_settings.TOKEN_TYPE_CLAIM) != token_type:
        raise UnauthorizedError(f"Invalid {token_type} token")
    if api_settings.USER_ID_CLAIM not in payload:
        raise UnauthorizedError(f"Invalid {token_type} token")
    return payload


def generate_access_and_refresh_tokens(user_id):
    """
    Issue a new token pair for ``user_id`` and store the refresh token.

    Only ``refresh_token`` is written (``update_fields``), so the rest of
    the row is neither validated nor touched.  Every failure is reported
    to the caller as the same opaque ``ServerError``.

    Returns
    -------
    tuple[str, str]
        ``(access_token, refresh_token)``
    """
    User = get_user_model()
    try:
        user = User.objects.get(pk=user_id)
        access_token = generate_access_token(user)
        refresh_token = generate_refresh_token(user)

        user.refresh_token = refresh_token
        user.save(update_fields=["refresh_token"])
    except Exception as exc:
        logger.error("Token generation failed for user %s: %s", user_id, exc)
        raise ServerError(
            "Something went wrong while generating refresh and access token"
        ) from exc

    return access_token, refresh_token
