"""Response envelope returned by every dispatcher call."""

from __future__ import annotations

from typing import Generic, TypeVar

import httpx

from lockstep.exceptions import error_class_for, parse_error_response
from lockstep.models import ErrorResult

T = TypeVar("T")


class LockstepResponse(Generic[T]):
    """Status code and payload of a single API call.

    The envelope does not raise for non-2xx statuses. Check ``is_success``
    (or call ``raise_for_status()``) before using ``value``.
    """

    def __init__(
        self,
        status_code: int,
        value: T | None = None,
        error: ErrorResult | None = None,
        raw: httpx.Response | None = None,
    ) -> None:
        """Initialize the envelope.

        Args:
            status_code: HTTP status code returned by the API
            value: Parsed payload, or raw bytes for blob downloads
            error: Problem details returned with a failed request
            raw: The underlying HTTP response
        """
        self.status_code = status_code
        self.value = value
        self.error = error
        self.raw = raw

    @property
    def is_success(self) -> bool:
        """True for 2xx statuses."""
        return 200 <= self.status_code < 300

    @property
    def headers(self) -> httpx.Headers:
        """Response headers."""
        if self.raw is None:
            return httpx.Headers()
        return self.raw.headers

    def raise_for_status(self) -> T | None:
        """Raise the matching LockstepAPIError for a non-2xx status.

        Returns:
            The payload when the call succeeded

        Raises:
            LockstepAPIError: On non-2xx statuses
        """
        if self.is_success:
            return self.value
        # Hand-built httpx responses may have no request attached
        if self.raw is not None and self.raw._request is not None:
            raise parse_error_response(self.raw)

        detail = None
        if self.error is not None:
            detail = self.error.detail or self.error.title
        raise error_class_for(self.status_code)(
            detail or f"HTTP {self.status_code} error",
            self.status_code,
            self.error.model_dump(by_alias=True) if self.error else None,
        )

    def __repr__(self) -> str:
        return f"<LockstepResponse [{self.status_code}]>"
