"""
Exception classes for API error handling.
"""


class APIException(Exception):
    """
    Base exception for API errors.

    All API exceptions should inherit from this class to ensure
    consistent error response formatting.
    """

    status_code: int = 500
    error_type: str = "api_error"
    message: str = "An error occurred"
    detail: str | None = None

    def __init__(
        self,
        message: str | None = None,
        detail: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.message = message or self.message
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class AuthRequiredError(APIException):
    """Exception raised when authentication is required but missing or invalid."""

    status_code = 401
    error_type = "authentication_required"
    message = "Authentication required"


class ForbiddenError(APIException):
    """Exception raised when the caller is authenticated but not an admin."""

    status_code = 403
    error_type = "forbidden"
    message = "Admin access required"
