from starlette.requests import Request

from openid_rp.clients.discovery import EndpointResolver
from openid_rp.errors import (
    DiscoveryError,
    DiscoveryTransportError,
    FormParseError,
    OpenIDError,
    ProtocolError,
    TransportError,
    UrlError,
)
from openid_rp.clients.openid import HttpOpenIDClient
from openid_rp.clients.types import VerificationResult


def get_openid_client(request: Request) -> HttpOpenIDClient:
    return request.app.state.openid_client


__all__ = [
    "DiscoveryError",
    "DiscoveryTransportError",
    "EndpointResolver",
    "FormParseError",
    "HttpOpenIDClient",
    "OpenIDError",
    "ProtocolError",
    "TransportError",
    "UrlError",
    "VerificationResult",
    "get_openid_client",
]
