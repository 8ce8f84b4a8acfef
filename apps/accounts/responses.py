"""Success envelope shared by every accounts endpoint."""

from rest_framework import status as http_status
from rest_framework.response import Response


class ApiResponse(Response):
    """
    ``Response`` that wraps its payload as
    ``{"statusCode", "data", "message", "success"}``.
    """

    def __init__(self, data=None, message="Success", status=http_status.HTTP_200_OK, **kwargs):
        body = {
            "statusCode": status,
            "data": data,
            "message": message,
            "success": status < 400,
        }
        super().__init__(body, status=status, **kwargs)
