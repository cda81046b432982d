"""API Client Abstractions for the NeoCities REST API.

All HTTP functionality is contained within the API client classes; site
operations build requests through them.
"""

from .base_client import (
    APIClientError,
    APIKind,
    MissingKeyError,
    MissingRequiredFieldError,
    NeocitiesAPIClient,
    NeocitiesError,
    ResponseDecodeError,
    SiteError,
    UnknownAPIError,
    decode_api_error,
)
from .multipart import MULTIPART_BOUNDARY, make_multipart_file
from .network_error_handler import (
    DNSResolutionError,
    NetworkConnectionError,
    NetworkError,
    NetworkErrorHandler,
    NetworkTimeoutError,
    SSLCertificateError,
)

__all__ = [
    # Base client
    "APIKind",
    "NeocitiesAPIClient",
    "NeocitiesError",
    "APIClientError",
    "MissingKeyError",
    "MissingRequiredFieldError",
    "UnknownAPIError",
    "SiteError",
    "ResponseDecodeError",
    "decode_api_error",
    # Multipart encoding
    "MULTIPART_BOUNDARY",
    "make_multipart_file",
    # Network errors
    "NetworkErrorHandler",
    "NetworkError",
    "NetworkConnectionError",
    "NetworkTimeoutError",
    "DNSResolutionError",
    "SSLCertificateError",
]
