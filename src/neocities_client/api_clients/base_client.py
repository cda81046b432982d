"""Base NeoCities API Client.

Provides request construction, Bearer authentication and response
decoding for the four NeoCities API endpoints.
"""

import json
import logging
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

import httpx

from ..errors import NeocitiesError
from ..models import APIError
from .network_error_handler import NetworkErrorHandler

logger = logging.getLogger(__name__)


class APIKind(str, Enum):
    """A NeoCities API endpoint."""

    UPLOAD = "upload"
    DELETE = "delete"
    LIST = "list"
    INFO = "info"


_API_METHODS = {
    APIKind.UPLOAD: "POST",
    APIKind.DELETE: "POST",
    APIKind.LIST: "GET",
    APIKind.INFO: "GET",
}


def api_name(api: Union[APIKind, str]) -> str:
    """Return the path segment of an API kind."""
    if isinstance(api, APIKind):
        return api.value
    return str(api)


class APIClientError(NeocitiesError):
    """Base exception for API client errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MissingKeyError(APIClientError):
    """Raised when an operation needs an API key and the site has none.

    The client that was built regardless is kept on ``client`` so the
    caller can still inspect it.
    """

    def __init__(
        self,
        message: str = "no key supplied, required for this operation",
        client: Optional["NeocitiesAPIClient"] = None,
    ):
        super().__init__(message)
        self.client = client


class MissingRequiredFieldError(APIClientError):
    """Raised when a Site field an operation depends on is empty."""

    def __init__(self, field: str):
        super().__init__(f"a required variable is missing: {field}")
        self.field = field


class UnknownAPIError(APIClientError):
    """Raised when a client is bound to an API kind with no known method."""

    def __init__(self, api: Union[APIKind, str]):
        super().__init__(f"no API supplied to APIClient: {api_name(api)!r}")
        self.api = api


class SiteError(APIClientError):
    """Raised when the API answers with a non-200 status."""

    def __init__(self, api: Union[APIKind, str], response: httpx.Response):
        self.api = api_name(api)
        self.status = f"{response.status_code} {response.reason_phrase}".strip()
        self.api_error = decode_api_error(response)
        super().__init__(
            f"an error occurred during API call, API: {self.api}, "
            f"Code: {self.status}, Response: {self.api_error.message}",
            status_code=response.status_code,
        )


class ResponseDecodeError(APIClientError):
    """Raised when a successful response body cannot be decoded."""

    pass


def decode_api_error(response: httpx.Response) -> APIError:
    """Decode the error payload of a failed API call.

    Never raises: a body that is not JSON, not an object, or lacks fields
    yields an APIError with empty strings in place of the missing values.
    """
    try:
        payload = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.debug(f"Error response body is not JSON: {response.text[:200]!r}")
        return APIError()

    if not isinstance(payload, dict):
        return APIError()

    return APIError(
        result=_as_text(payload.get("result")),
        error_type=_as_text(payload.get("error_type")),
        message=_as_text(payload.get("message")),
    )


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


class NeocitiesAPIClient:
    """A request builder bound to one NeoCities API endpoint.

    Base headers and query parameters are fixed when the client is
    created. Everything specific to a single call is passed to
    ``new_api_request`` and applied to that request only, so one client
    can be reused across a batch of calls without state leaking between
    them.
    """

    def __init__(
        self,
        api: Union[APIKind, str],
        base_url: str,
        key: str = "",
        http_client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize API client.

        Args:
            api: Endpoint the client targets
            base_url: Scheme and host of the NeoCities API
            key: API key; when set, an Authorization header is added
            http_client: Shared httpx client (not closed by this client)
            timeout: Request timeout for a client created here
        """
        self.api = api
        self.base_url = base_url.rstrip("/")
        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.Client(timeout=timeout)
        self._network_error_handler = NetworkErrorHandler()

        headers: Dict[str, str] = {}
        if key:
            headers["Authorization"] = f"Bearer {key}"
        self._headers: Mapping[str, str] = MappingProxyType(headers)
        self._params: Mapping[str, str] = MappingProxyType({})

    @property
    def headers(self) -> Mapping[str, str]:
        """Read-only view of the headers sent with every request."""
        return self._headers

    @property
    def authenticated(self) -> bool:
        return "Authorization" in self._headers

    @property
    def url(self) -> str:
        return f"{self.base_url}/api/{api_name(self.api)}"

    def change_api(self, api: Union[APIKind, str]) -> "NeocitiesAPIClient":
        """Point the client at another endpoint, keeping its headers."""
        self.api = api
        return self

    def new_api_request(
        self,
        body: Optional[bytes] = None,
        *,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        data: Optional[Mapping[str, Any]] = None,
    ) -> httpx.Request:
        """Build a request for the bound endpoint.

        Args:
            body: Raw request body
            params: Query parameters for this request only
            headers: Headers for this request only, layered over the base headers
            data: Form fields, encoded as application/x-www-form-urlencoded

        Returns:
            The request, ready for ``send``

        Raises:
            UnknownAPIError: If the bound API kind has no HTTP method
        """
        try:
            method = _API_METHODS[APIKind(self.api)]
        except (ValueError, KeyError):
            raise UnknownAPIError(self.api)

        request_headers = dict(self._headers)
        if headers:
            request_headers.update(headers)

        request_params = dict(self._params)
        if params:
            request_params.update(params)

        return self.http_client.build_request(
            method,
            self.url,
            content=body,
            data=data,
            params=request_params or None,
            headers=request_headers,
        )

    def send(self, request: httpx.Request) -> httpx.Response:
        """Send a request, classifying failures to get a response.

        Raises:
            NetworkError: If the host cannot be reached
        """
        try:
            return self.http_client.send(request)
        except httpx.RequestError as e:
            raise self._network_error_handler.classify_network_error(e) from e

    def close(self) -> None:
        """Close the underlying httpx client if this client created it."""
        if self._owns_http_client and not self.http_client.is_closed:
            self.http_client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
