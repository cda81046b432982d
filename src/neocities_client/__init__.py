"""
NeoCities Client - upload, push, delete and list files on a NeoCities site.

A small wrapper around the NeoCities REST API with a command line front end.
"""

__version__ = "0.1.0"

from .api_clients import (  # noqa: E402
    APIClientError,
    APIKind,
    MissingKeyError,
    MissingRequiredFieldError,
    NeocitiesAPIClient,
    NeocitiesError,
    NetworkError,
    SiteError,
)
from .config import ClientConfig, load_config  # noqa: E402
from .credentials import read_key_file, resolve_key  # noqa: E402
from .models import APIError, SiteFile, SiteInfo  # noqa: E402
from .site import PushReport, Site  # noqa: E402

__all__ = [
    "APIClientError",
    "APIError",
    "APIKind",
    "ClientConfig",
    "MissingKeyError",
    "MissingRequiredFieldError",
    "NeocitiesAPIClient",
    "NeocitiesError",
    "NetworkError",
    "PushReport",
    "Site",
    "SiteError",
    "SiteFile",
    "SiteInfo",
    "load_config",
    "read_key_file",
    "resolve_key",
]
