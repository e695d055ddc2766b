from __future__ import annotations

from typing import Any, Mapping


class OpenIDError(Exception):
    def __init__(
        self,
        message: str,
        *,
        description: str | None = None,
        status_code: int | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.description = description
        self.status_code = status_code
        self.details = dict(details or {})


class DiscoveryError(OpenIDError):
    """Raised when the provider's discovery document cannot be fetched or parsed."""


class UrlError(OpenIDError, ValueError):
    """Raised when a URL is malformed, either supplied or composed."""


class ProtocolError(OpenIDError):
    """Raised when the provider answers direct verification in an unknown namespace."""


class TransportError(OpenIDError):
    """Raised when an outbound request to the provider fails."""


class FormParseError(OpenIDError):
    """Raised when the callback request body is not valid form data."""


class DiscoveryTransportError(DiscoveryError, TransportError):
    """Network failure while fetching the discovery document."""
