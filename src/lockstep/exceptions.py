"""Exceptions for the Lockstep SDK."""

from typing import Any

import httpx


class LockstepConfigurationError(ValueError):
    """Raised when the client is configured with unusable settings."""

    pass


class LockstepAPIError(httpx.HTTPStatusError):
    """Base exception for all Lockstep API errors.

    Extends httpx.HTTPStatusError so users can catch both LockstepAPIError
    and httpx.HTTPStatusError to handle API errors.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_data: dict[str, Any] | None = None,
        request: httpx.Request | None = None,
        response: httpx.Response | None = None,
    ) -> None:
        """Initialize LockstepAPIError.

        Args:
            message: Error message
            status_code: HTTP status code from the API response
            response_data: Problem details returned by the API
            request: The request that caused the error
            response: The response from the API
        """
        if request and response:
            super().__init__(message, request=request, response=response)
        else:
            Exception.__init__(self, message)

        self.message = message
        self.status_code = status_code
        self.response_data = response_data or {}

    @property
    def trace_id(self) -> str | None:
        """Server-side trace identifier, if the API returned one."""
        return self.response_data.get("traceId")

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message


class LockstepValidationError(LockstepAPIError):
    """Raised when request validation fails (400)."""

    pass


class LockstepAuthError(LockstepAPIError):
    """Raised when authentication fails (401/403)."""

    pass


class LockstepNotFoundError(LockstepAPIError):
    """Raised when a resource is not found (404)."""

    pass


class LockstepMethodNotAllowedError(LockstepAPIError):
    """Raised when HTTP method is not allowed (405)."""

    pass


class LockstepConflictError(LockstepAPIError):
    """Raised when a write conflicts with the current resource state (409)."""

    pass


class LockstepUnsupportedMediaTypeError(LockstepAPIError):
    """Raised when media type is not supported (415)."""

    pass


class LockstepRateLimitError(LockstepAPIError):
    """Raised when rate limit is exceeded (429)."""

    pass


class LockstepServerError(LockstepAPIError):
    """Raised when server encounters an error (5xx)."""

    pass


_STATUS_ERRORS: dict[int, type[LockstepAPIError]] = {
    400: LockstepValidationError,
    401: LockstepAuthError,
    403: LockstepAuthError,
    404: LockstepNotFoundError,
    405: LockstepMethodNotAllowedError,
    409: LockstepConflictError,
    415: LockstepUnsupportedMediaTypeError,
    429: LockstepRateLimitError,
}


def error_class_for(status_code: int) -> type[LockstepAPIError]:
    """Return the exception class for an HTTP status code."""
    if status_code >= 500:
        return LockstepServerError
    return _STATUS_ERRORS.get(status_code, LockstepAPIError)


def parse_error_response(response: httpx.Response) -> LockstepAPIError:
    """Parse error response and return appropriate exception.

    The Lockstep API reports failures as problem details
    (``type``, ``title``, ``status``, ``detail``, ``traceId``).

    Args:
        response: HTTP response from the API

    Returns:
        Appropriate LockstepAPIError subclass
    """
    status_code = response.status_code
    try:
        error_data: dict[str, Any] = response.json()
        if not isinstance(error_data, dict):
            error_data = {}
        message = (
            error_data.get("detail")
            or error_data.get("title")
            or response.text
            or "Unknown error"
        )
    except ValueError:
        message = response.text or f"HTTP {status_code} error"
        error_data = {}

    error_class = error_class_for(status_code)
    return error_class(message, status_code, error_data, response.request, response)
