"""Lockstep Platform SDK for Python."""

from lockstep._version import __version__
from lockstep.client_async import AsyncLockstepApi
from lockstep.client_base import ClientConfig
from lockstep.client_sync import LockstepApi
from lockstep.exceptions import (
    LockstepAPIError,
    LockstepAuthError,
    LockstepConfigurationError,
    LockstepConflictError,
    LockstepNotFoundError,
    LockstepRateLimitError,
    LockstepServerError,
    LockstepValidationError,
)
from lockstep.response import LockstepResponse

__all__ = [
    "__version__",
    "LockstepApi",
    "AsyncLockstepApi",
    "ClientConfig",
    "LockstepResponse",
    "LockstepAPIError",
    "LockstepAuthError",
    "LockstepConfigurationError",
    "LockstepConflictError",
    "LockstepNotFoundError",
    "LockstepRateLimitError",
    "LockstepServerError",
    "LockstepValidationError",
]
