"""
API errors with stable machine-readable codes.

Every error is rendered as ``{"error": <message>, "code": <code>}``.
"""

from typing import Any, Dict


class APIError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500
    code: str = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "code": self.code}


class InvalidParametersError(APIError):
    """Missing or malformed query parameters."""

    status_code = 400
    code = "INVALID_PARAMETERS"


class UnauthorizedError(APIError):
    status_code = 401
    code = "UNAUTHORIZED"


class NotFoundError(APIError):
    status_code = 404
    code = "NOT_FOUND"


class InternalServerError(APIError):
    status_code = 500
    code = "INTERNAL_SERVER_ERROR"
