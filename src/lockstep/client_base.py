"""Base client functionality for the Lockstep Platform API."""

from __future__ import annotations

import logging
import mimetypes
import os
import socket
from collections.abc import AsyncIterator, Awaitable, Callable, Iterator, Mapping
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Any, BinaryIO, Generic, TypeVar, Union

import httpx
from pydantic import BaseModel, TypeAdapter
from pydantic_core import to_jsonable_python

from lockstep._version import __version__
from lockstep.auth import ApiKeyAuth, BaseAuth, BearerTokenAuth
from lockstep.exceptions import LockstepConfigurationError
from lockstep.models import ErrorResult, FetchResult
from lockstep.response import LockstepResponse

if TYPE_CHECKING:
    from typing_extensions import Self

    from lockstep.client_async import AsyncLockstepApi
    from lockstep.client_sync import LockstepApi

logger = logging.getLogger(__name__)

T = TypeVar("T")

HeaderHook = Callable[
    [dict[str, str]], Union[Mapping[str, str], Awaitable[Mapping[str, str]]]
]


class ClientConfig:
    """Configuration for Lockstep API clients."""

    ENVIRONMENTS = {
        "sbx": "https://api.sbx.lockstep.io/",
        "prd": "https://api.lockstep.io/",
    }
    DEFAULT_ENVIRONMENT = "prd"
    DEFAULT_TIMEOUT = 30.0
    DEFAULT_PAGE_SIZE = 200
    SDK_NAME = "Python"

    ENV_API_URL = "LOCKSTEP_API_URL"
    ENV_ENVIRONMENT = "LOCKSTEP_ENVIRONMENT"
    ENV_API_KEY = "LOCKSTEP_API_KEY"
    ENV_BEARER_TOKEN = "LOCKSTEP_BEARER_TOKEN"
    ENV_APP_NAME = "LOCKSTEP_APP_NAME"


def resolve_environment(env: str) -> str:
    """Map an environment name to its server URL.

    Unrecognized names fall back to production.

    Args:
        env: Environment name, ``sbx`` or ``prd``

    Returns:
        Server URL for the environment
    """
    url = ClientConfig.ENVIRONMENTS.get(env)
    if url is None:
        logger.warning(
            "Unknown Lockstep environment %r, using %r",
            env,
            ClientConfig.DEFAULT_ENVIRONMENT,
        )
        url = ClientConfig.ENVIRONMENTS[ClientConfig.DEFAULT_ENVIRONMENT]
    return url


def validate_custom_url(unsafe_url: str) -> str:
    """Check that a custom server URL is a well-formed http(s) URL.

    Args:
        unsafe_url: URL of a proxy, gateway or other non-standard server

    Returns:
        The URL, unchanged

    Raises:
        LockstepConfigurationError: If the URL cannot be used as a base URL
    """
    try:
        parsed = httpx.URL(unsafe_url)
    except httpx.InvalidURL as e:
        raise LockstepConfigurationError(f"Invalid server URL: {unsafe_url!r}") from e
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise LockstepConfigurationError(
            f"Server URL must be an absolute http(s) URL: {unsafe_url!r}"
        )
    return unsafe_url


def query_options(
    filter: str | None = None,
    include: str | None = None,
    order: str | None = None,
    page_size: int | None = None,
    page_number: int | None = None,
) -> dict[str, Any]:
    """Build the query options shared by all query endpoints.

    See the Searchlight query language documentation for the syntax of
    ``filter`` and ``order``.
    """
    return {
        "filter": filter,
        "include": include,
        "order": order,
        "pageSize": page_size,
        "pageNumber": page_number,
    }


def build_query_params(options: Mapping[str, Any] | None) -> dict[str, Any] | None:
    """Drop unset query options and convert the rest to wire values.

    Args:
        options: Query option mapping, values may be None

    Returns:
        Query parameters for httpx, or None when nothing is set
    """
    if not options:
        return None
    params: dict[str, Any] = {}
    for key, value in options.items():
        if value is None:
            continue
        if isinstance(value, bool):
            params[key] = "true" if value else "false"
        elif isinstance(value, (list, tuple)):
            params[key] = [str(to_jsonable_python(v)) for v in value]
        elif isinstance(value, (str, int, float)):
            params[key] = value
        else:
            params[key] = str(to_jsonable_python(value))
    return params or None


def serialize_body(body: Any) -> Any:
    """Convert a request body to JSON-compatible data.

    Pydantic models are dumped by alias with unset (None) fields left out.
    Mappings are passed through as given, so an explicit None in a PATCH body
    still clears the field server-side.
    """
    if body is None:
        return None
    if isinstance(body, BaseModel):
        return body.model_dump(by_alias=True, exclude_none=True, mode="json")
    if isinstance(body, Mapping):
        return {str(key): serialize_body(value) for key, value in body.items()}
    if isinstance(body, (list, tuple)):
        return [serialize_body(item) for item in body]
    return to_jsonable_python(body)


def prepare_attachment(
    file: Path | str | BinaryIO | bytes,
    filename: str | None = None,
) -> tuple[str, bytes, str]:
    """Prepare file attachment for upload.

    Args:
        file: File path, file path string, file-like object or raw bytes
        filename: Optional filename override

    Returns:
        Tuple of (filename, file_bytes, content_type)
    """
    if isinstance(file, (Path, str)):
        file_path = Path(file)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        actual_filename = filename or file_path.name

        # Read bytes immediately to avoid async file handle issues
        with open(file_path, "rb") as f:
            file_bytes = f.read()

        content_type = mimetypes.guess_type(file_path)[0] or "application/octet-stream"
        return actual_filename, file_bytes, content_type

    if isinstance(file, bytes):
        actual_filename = filename or "attachment"
        file_bytes = file
    else:
        actual_filename = filename or Path(getattr(file, "name", "attachment")).name
        file_bytes = file.read()
    content_type = mimetypes.guess_type(actual_filename)[0] or "application/octet-stream"
    return actual_filename, file_bytes, content_type


def coerce_headers(headers: Any) -> dict[str, str]:
    """Validate the value returned by a header hook.

    Headers whose value is None are left out; other values become strings.

    Raises:
        LockstepConfigurationError: If the hook did not return a mapping
    """
    if not isinstance(headers, Mapping):
        raise LockstepConfigurationError(
            f"Header hook must return a mapping of headers, got {type(headers).__name__}"
        )
    return {str(key): str(value) for key, value in headers.items() if value is not None}


@lru_cache(maxsize=128)
def _type_adapter(model: Any) -> TypeAdapter[Any]:
    return TypeAdapter(model)


def _parse_error_body(response: httpx.Response) -> ErrorResult | None:
    if not response.content:
        return None
    try:
        data = response.json()
        if isinstance(data, dict):
            return ErrorResult.model_validate(data)
    except ValueError:
        logger.debug("Could not parse error body for status %s", response.status_code)
    return None


def build_response(
    response: httpx.Response, model: Any | None = None
) -> LockstepResponse[Any]:
    """Wrap an HTTP response in an envelope with a parsed JSON payload.

    Successful payloads are validated against ``model`` when one is given.
    Non-2xx responses carry the server's problem details in ``error``.

    Args:
        response: HTTP response from the API
        model: Type to validate the payload against

    Returns:
        Response envelope
    """
    if not response.is_success:
        return LockstepResponse(
            response.status_code, error=_parse_error_body(response), raw=response
        )

    value: Any = None
    if response.content:
        value = response.json()
        if model is not None:
            value = _type_adapter(model).validate_python(value)
    return LockstepResponse(response.status_code, value, raw=response)


def build_blob_response(response: httpx.Response) -> LockstepResponse[bytes]:
    """Wrap an HTTP response in an envelope carrying the raw body bytes."""
    return LockstepResponse(response.status_code, response.content, raw=response)


class BaseLockstepApi:
    """Configuration shared by the sync and async Lockstep clients.

    Holds the server URL and the mutable per-session settings used to build
    request headers. Credentials live in a single slot, so configuring a
    bearer token removes any API key and vice versa.

    Settings are read when each request is sent; changing them while requests
    are in flight affects only requests issued afterwards.
    """

    def __init__(
        self,
        *,
        env: str = ClientConfig.DEFAULT_ENVIRONMENT,
        base_url: str | None = None,
        bearer_token: str | None = None,
        api_key: str | None = None,
        app_name: str | None = None,
        header_hook: HeaderHook | None = None,
        timeout: float | None = ClientConfig.DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize client configuration.

        Args:
            env: Environment name, ``sbx`` or ``prd`` (unknown names use ``prd``)
            base_url: Custom server URL, overrides ``env``
            bearer_token: JWT bearer token
            api_key: Lockstep Platform API key
            app_name: Application name sent with every request
            header_hook: Function called with the headers of each request;
                its return value replaces them
            timeout: Request timeout in seconds, None to disable

        Raises:
            ValueError: If both bearer_token and api_key are provided
            LockstepConfigurationError: If base_url is not a usable URL
        """
        if bearer_token and api_key:
            raise ValueError("Provide either bearer_token or api_key, not both")

        if base_url is not None:
            self._server_url = validate_custom_url(base_url)
        else:
            self._server_url = resolve_environment(env)

        self.auth: BaseAuth | None = None
        if bearer_token:
            self.auth = BearerTokenAuth(bearer_token)
        elif api_key:
            self.auth = ApiKeyAuth(api_key)

        self.app_name = app_name
        self.header_hook = header_hook
        self.timeout = timeout
        self.machine_name = socket.gethostname()

    @classmethod
    def with_environment(
        cls, env: str = ClientConfig.DEFAULT_ENVIRONMENT, **options: Any
    ) -> Self:
        """Construct a client targeting a named environment.

        * sbx - https://api.sbx.lockstep.io/
        * prd - https://api.lockstep.io/

        Args:
            env: Environment name
            **options: Other constructor arguments

        Returns:
            New client
        """
        return cls(env=env, **options)

    @classmethod
    def with_custom_environment(cls, unsafe_url: str, **options: Any) -> Self:
        """Construct a client that uses a non-standard server.

        This can be necessary when going through a proxy server or an API
        gateway. Prefer ``with_environment()`` wherever possible: the URL is
        used as given and only checked for being an absolute http(s) URL.

        Args:
            unsafe_url: Custom server URL
            **options: Other constructor arguments

        Returns:
            New client
        """
        return cls(base_url=unsafe_url, **options)

    @classmethod
    def from_env(cls, **options: Any) -> Self:
        """Construct a client from ``LOCKSTEP_*`` environment variables.

        ``LOCKSTEP_API_URL`` takes precedence over ``LOCKSTEP_ENVIRONMENT``.
        Explicit keyword arguments override the environment: passing ``env``
        or ``base_url`` ignores both URL variables, and passing either
        credential ignores both credential variables.
        """
        settings: dict[str, Any] = {
            "app_name": os.getenv(ClientConfig.ENV_APP_NAME) or None,
        }
        if "env" not in options and "base_url" not in options:
            settings["env"] = (
                os.getenv(ClientConfig.ENV_ENVIRONMENT) or ClientConfig.DEFAULT_ENVIRONMENT
            )
            settings["base_url"] = os.getenv(ClientConfig.ENV_API_URL) or None
        if "api_key" not in options and "bearer_token" not in options:
            settings["api_key"] = os.getenv(ClientConfig.ENV_API_KEY) or None
            settings["bearer_token"] = os.getenv(ClientConfig.ENV_BEARER_TOKEN) or None
        settings.update(options)
        return cls(**settings)

    @property
    def server_url(self) -> str:
        """Server URL this client sends requests to."""
        return self._server_url

    @property
    def bearer_token(self) -> str | None:
        """Configured bearer token, if any."""
        return self.auth.token if isinstance(self.auth, BearerTokenAuth) else None

    @property
    def api_key(self) -> str | None:
        """Configured API key, if any."""
        return self.auth.api_key if isinstance(self.auth, ApiKeyAuth) else None

    def with_bearer_token(self, token: str) -> Self:
        """Use a JWT bearer token, replacing any API key.

        Args:
            token: JWT bearer token for this API session

        Returns:
            This client, for chaining
        """
        self.auth = BearerTokenAuth(token)
        return self

    def with_api_key(self, api_key: str) -> Self:
        """Use an API key, replacing any bearer token.

        Args:
            api_key: API key for this API session

        Returns:
            This client, for chaining
        """
        self.auth = ApiKeyAuth(api_key)
        return self

    def with_application_name(self, app_name: str) -> Self:
        """Send an application name with every request."""
        self.app_name = app_name
        return self

    def with_header_hook(self, hook: HeaderHook | None) -> Self:
        """Install a function that rewrites the headers of every request.

        The hook receives the headers built by ``build_headers()`` and its
        return value is sent *instead of* them, not merged with them. To add
        a header, copy the argument, update it and return the copy.

        Args:
            hook: Header function, or None to remove it

        Returns:
            This client, for chaining
        """
        self.header_hook = hook
        return self

    def build_headers(self) -> dict[str, str]:
        """Build the headers for a request from the current configuration."""
        headers = {
            "SdkName": ClientConfig.SDK_NAME,
            "SdkVersion": __version__,
            "MachineName": self.machine_name,
        }
        if self.app_name is not None:
            headers["ApplicationName"] = self.app_name
        if self.auth is not None:
            headers.update(self.auth.get_headers())
        return headers

    def _url(self, path: str) -> str:
        return str(httpx.URL(self._server_url).join(path))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._server_url}>"


class PaginatedIterator(Iterator[T]):
    """Iterator over all records matched by a query endpoint.

    Automatically fetches subsequent pages as needed.
    """

    def __init__(
        self,
        api: LockstepApi,
        path: str,
        params: Mapping[str, Any],
        model_class: type[T],
        page_size: int = ClientConfig.DEFAULT_PAGE_SIZE,
    ) -> None:
        """Initialize paginated iterator.

        Args:
            api: Client used to fetch pages
            path: Path of the query endpoint
            params: Query options other than paging
            model_class: Model class for the records
            page_size: Number of records per page
        """
        self.api = api
        self.path = path
        self.params = dict(params)
        self.model_class = model_class
        self.page_size = page_size
        self.page_number = 0
        self.total_count: int | None = None
        self.fetched = 0
        self.items: list[T] = []
        self.index = 0
        self._exhausted = False

    def __iter__(self) -> Iterator[T]:
        """Return iterator."""
        return self

    def __next__(self) -> T:
        """Get next item, fetching new page if needed."""
        if self.index >= len(self.items):
            if self._exhausted:
                raise StopIteration
            self._fetch_page()
            if not self.items:
                raise StopIteration

        item = self.items[self.index]
        self.index += 1
        return item

    def _fetch_page(self) -> None:
        params = dict(self.params, pageSize=self.page_size, pageNumber=self.page_number)
        response = self.api.request(
            "GET", self.path, params, model=FetchResult[self.model_class]
        )
        result = response.raise_for_status()
        _apply_page(self, result)


class AsyncPaginatedIterator(Generic[T]):
    """Async iterator over all records matched by a query endpoint.

    Automatically fetches subsequent pages as needed.
    """

    def __init__(
        self,
        api: AsyncLockstepApi,
        path: str,
        params: Mapping[str, Any],
        model_class: type[T],
        page_size: int = ClientConfig.DEFAULT_PAGE_SIZE,
    ) -> None:
        """Initialize async paginated iterator.

        Args:
            api: Async client used to fetch pages
            path: Path of the query endpoint
            params: Query options other than paging
            model_class: Model class for the records
            page_size: Number of records per page
        """
        self.api = api
        self.path = path
        self.params = dict(params)
        self.model_class = model_class
        self.page_size = page_size
        self.page_number = 0
        self.total_count: int | None = None
        self.fetched = 0
        self.items: list[T] = []
        self.index = 0
        self._exhausted = False

    def __aiter__(self) -> AsyncIterator[T]:
        """Return async iterator."""
        return self

    async def __anext__(self) -> T:
        """Get next item, fetching new page if needed."""
        if self.index >= len(self.items):
            if self._exhausted:
                raise StopAsyncIteration
            await self._fetch_page()
            if not self.items:
                raise StopAsyncIteration

        item = self.items[self.index]
        self.index += 1
        return item

    async def _fetch_page(self) -> None:
        params = dict(self.params, pageSize=self.page_size, pageNumber=self.page_number)
        response = await self.api.request(
            "GET", self.path, params, model=FetchResult[self.model_class]
        )
        result = response.raise_for_status()
        _apply_page(self, result)


def _apply_page(
    iterator: PaginatedIterator[Any] | AsyncPaginatedIterator[Any],
    result: FetchResult[Any] | None,
) -> None:
    records = list(result.records or []) if result is not None else []
    iterator.items = records
    iterator.index = 0
    iterator.page_number += 1
    iterator.fetched += len(records)
    if result is not None and result.total_count is not None:
        iterator.total_count = result.total_count

    if len(records) < iterator.page_size or (
        iterator.total_count is not None and iterator.fetched >= iterator.total_count
    ):
        iterator._exhausted = True
