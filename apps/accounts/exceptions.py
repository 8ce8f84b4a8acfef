"""
Typed API errors and the project-wide DRF exception handler.

Views raise an ``ApiError`` subclass and never build error responses
themselves; ``api_exception_handler`` is the single place where any
exception becomes the JSON error envelope::

    {"statusCode": 409, "data": null, "message": "...",
     "success": false, "errors": [...]}
"""

import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Error taxonomy
# ---------------------------------------------------------------------------

class ApiError(APIException):
    """
    Base class for errors raised deliberately by the accounts API.

    ``detail`` is the human-readable message; ``errors`` carries optional
    structured context (e.g. serializer field errors).
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Something went wrong"
    default_code = "error"

    def __init__(self, detail=None, code=None, errors=None):
        super().__init__(detail, code)
        self.errors = errors if errors is not None else []


class BadRequestError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad request"
    default_code = "bad_request"


class UnauthorizedError(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized request"
    default_code = "unauthorized"


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"
    default_code = "not_found"


class ConflictError(ApiError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists"
    default_code = "conflict"


class ServerError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"
    default_code = "server_error"


# ---------------------------------------------------------------------------
# Response translator
# ---------------------------------------------------------------------------

def _error_body(status_code, message, errors):
    return {
        "statusCode": status_code,
        "data": None,
        "message": message,
        "success": False,
        "errors": errors,
    }


def api_exception_handler(exc, context):
    """
    Render every exception raised inside a DRF view as the error envelope.

    DRF's default handler runs first so its own exceptions keep their
    status codes and headers (``WWW-Authenticate``, ``Allow``,
    ``Retry-After``).  Anything it does not recognise is logged and
    reported as an opaque 500.
    """
    # rest_framework.views imports the authentication classes, which import
    # this module, so it cannot be imported at module level.
    from rest_framework.views import exception_handler

    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.exception(
            "Unhandled error in %s",
            view.__class__.__name__ if view else "view",
            exc_info=exc,
        )
        return Response(
            _error_body(500, ServerError.default_detail, []),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, ApiError):
        message = str(exc.detail)
        errors = exc.errors
    elif isinstance(response.data, dict) and "detail" in response.data:
        message = str(response.data["detail"])
        errors = []
    else:
        message = "Invalid request"
        errors = response.data

    response.data = _error_body(response.status_code, message, errors)
    return response
