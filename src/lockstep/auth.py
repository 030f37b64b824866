"""Authentication for the Lockstep Platform API.

Authentication is either via an API key or a JWT bearer token, never both.
"""

from abc import ABC, abstractmethod


class BaseAuth(ABC):
    """Base authentication class."""

    @abstractmethod
    def get_headers(self) -> dict[str, str]:
        """Get authentication headers for requests."""
        pass


class BearerTokenAuth(BaseAuth):
    """Authentication using a JWT bearer token."""

    def __init__(self, token: str) -> None:
        """Initialize bearer token authentication.

        Args:
            token: JWT bearer token for this API session
        """
        self.token = token

    def get_headers(self) -> dict[str, str]:
        """Get authentication headers."""
        return {"Authorization": f"Bearer {self.token}"}

    def __repr__(self) -> str:
        return "BearerTokenAuth(token=***)"


class ApiKeyAuth(BaseAuth):
    """Authentication using a Lockstep Platform API key."""

    def __init__(self, api_key: str) -> None:
        """Initialize API key authentication.

        Args:
            api_key: API key for this API session
        """
        self.api_key = api_key

    def get_headers(self) -> dict[str, str]:
        """Get authentication headers."""
        return {"ApiKey": self.api_key}

    def __repr__(self) -> str:
        return "ApiKeyAuth(api_key=***)"
