"""Network Error Handler for the NeoCities API Client.

Classifies httpx transport failures into specific exceptions and attaches
user guidance that the CLI can print alongside the error message.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, cast

import httpx

from ..errors import NeocitiesError

logger = logging.getLogger(__name__)


@dataclass
class UserGuidance:
    """User guidance information for network errors."""

    error_type: str
    troubleshooting_steps: List[str]
    additional_notes: List[str] = field(default_factory=list)

    def format_for_console(self) -> str:
        """Format guidance for rich console output."""
        content = []
        content.append(f"[bold red]Error Type:[/bold red] {self.error_type}")
        content.append("")
        content.append("[bold yellow]Troubleshooting Steps:[/bold yellow]")

        for i, step in enumerate(self.troubleshooting_steps, 1):
            content.append(f"{i}. {step}")

        if self.additional_notes:
            content.append("")
            content.append("[bold blue]Additional Notes:[/bold blue]")
            for note in self.additional_notes:
                content.append(f"• {note}")

        return "\n".join(content)


class NetworkError(NeocitiesError):
    """Base exception for failures reaching the NeoCities host."""

    def __init__(self, message: str, user_guidance: Optional[str] = None):
        super().__init__(message)
        self.user_guidance = user_guidance or ""


class NetworkConnectionError(NetworkError):
    """Exception raised for connection-related network failures."""

    pass


class NetworkTimeoutError(NetworkError):
    """Exception raised for timeout-related network failures."""

    pass


class DNSResolutionError(NetworkError):
    """Exception raised for DNS resolution failures."""

    pass


class SSLCertificateError(NetworkError):
    """Exception raised for SSL certificate verification failures."""

    pass


class UserGuidanceProvider:
    """Provides user guidance for different network error scenarios."""

    def __init__(self):
        self._guidance_mapping = {
            NetworkConnectionError: self._get_connection_error_guidance,
            DNSResolutionError: self._get_dns_resolution_guidance,
            SSLCertificateError: self._get_ssl_certificate_guidance,
            NetworkTimeoutError: self._get_timeout_guidance,
        }

    def get_guidance(self, error: Exception) -> UserGuidance:
        """Get user guidance for a specific error."""
        guidance_func = self._guidance_mapping.get(
            type(error), self._get_generic_guidance
        )
        return cast(UserGuidance, guidance_func(error))

    def _get_connection_error_guidance(
        self, error: NetworkConnectionError
    ) -> UserGuidance:
        return UserGuidance(
            error_type="Network Connection Error",
            troubleshooting_steps=[
                "Check your internet connection",
                "Verify the configured base URL is correct",
                "Check your firewall or proxy settings",
            ],
            additional_notes=[
                "This error typically indicates the host is not reachable",
            ],
        )

    def _get_dns_resolution_guidance(self, error: DNSResolutionError) -> UserGuidance:
        return UserGuidance(
            error_type="DNS Resolution Error",
            troubleshooting_steps=[
                "Check your internet connection",
                "Verify the host name in the base URL is spelled correctly",
                "Check your DNS server settings",
            ],
            additional_notes=[
                "DNS resolution issues are often temporary",
            ],
        )

    def _get_ssl_certificate_guidance(self, error: SSLCertificateError) -> UserGuidance:
        return UserGuidance(
            error_type="SSL Certificate Error",
            troubleshooting_steps=[
                "Check that your system clock is correct",
                "Check if you need to update your certificate store",
                "Verify no proxy is intercepting HTTPS traffic",
            ],
        )

    def _get_timeout_guidance(self, error: NetworkTimeoutError) -> UserGuidance:
        return UserGuidance(
            error_type="Network Timeout Error",
            troubleshooting_steps=[
                "Check your network connection speed and stability",
                "Try again later",
                "Raise or unset the configured timeout for large uploads",
            ],
        )

    def _get_generic_guidance(self, error: Exception) -> UserGuidance:
        return UserGuidance(
            error_type="Unknown Network Error",
            troubleshooting_steps=[
                "Check your network connection",
                "Try again in a few minutes",
            ],
        )


class NetworkErrorHandler:
    """Maps httpx exceptions onto NetworkError subclasses."""

    def __init__(self):
        self.guidance_provider = UserGuidanceProvider()
        self._dns_error_patterns = [
            r"name.*resolution.*failed",
            r"name.*or.*service.*not.*known",
            r"nodename.*nor.*servname.*provided",
            r"temporary.*failure.*in.*name.*resolution",
            r"getaddrinfo.*failed",
        ]
        self._ssl_error_patterns = [
            r"ssl.*certificate.*verification.*failed",
            r"certificate.*verify.*failed",
            r"ssl.*handshake.*failed",
            r"bad.*certificate",
        ]

    def classify_network_error(self, error: Exception) -> NetworkError:
        """Classify an httpx exception.

        Args:
            error: The original httpx exception

        Returns:
            The specific NetworkError to raise in its place
        """
        error_message = str(error).lower()

        if isinstance(error, httpx.TimeoutException):
            classified: NetworkError = self._timeout_error(error_message)
        elif isinstance(error, httpx.ConnectError):
            classified = self._connect_error(error, error_message)
        elif isinstance(error, httpx.TransportError):
            classified = NetworkConnectionError(f"Network error: {error}")
        else:
            classified = NetworkConnectionError(f"Request failed: {error}")

        guidance = self.guidance_provider.get_guidance(classified)
        classified.user_guidance = guidance.format_for_console()
        logger.debug(f"Classified {type(error).__name__} as {type(classified).__name__}")
        return classified

    def _connect_error(self, error: httpx.ConnectError, error_message: str) -> NetworkError:
        if any(re.search(pattern, error_message) for pattern in self._dns_error_patterns):
            return DNSResolutionError(
                "Cannot resolve server address. Check your internet connection and base URL."
            )

        if any(re.search(pattern, error_message) for pattern in self._ssl_error_patterns):
            return SSLCertificateError(
                "SSL certificate verification failed. Server may be using invalid certificate."
            )

        return NetworkConnectionError(f"Connection failed: {error}")

    def _timeout_error(self, error_message: str) -> NetworkError:
        if "connect" in error_message:
            return NetworkTimeoutError(
                "Connection timed out. Check your network connection or try again later."
            )
        return NetworkTimeoutError(
            "Request timed out. Check your network connection or try again later."
        )
