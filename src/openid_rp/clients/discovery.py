from __future__ import annotations

import logging
import threading
import xml.etree.ElementTree as ET
from typing import Iterator, Optional

import httpx

from openid_rp.errors import DiscoveryError, DiscoveryTransportError, UrlError
from openid_rp.urls import validate_absolute

logger = logging.getLogger(__name__)

OP_SERVER_TYPE = "http://specs.openid.net/auth/2.0/server"
XRDS_CONTENT_TYPE = "application/xrds+xml"


class EndpointResolver:
    """Resolves and memoizes the provider's OpenID endpoint.

    The first successful lookup is kept for the lifetime of the resolver.
    Failures are not remembered, so a later call fetches again.
    """

    def __init__(self, discovery_url: str, *, timeout: float = 10.0) -> None:
        self._discovery_url = discovery_url
        self._timeout = timeout
        self._endpoint: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def discovery_url(self) -> str:
        return self._discovery_url

    @property
    def endpoint(self) -> Optional[str]:
        return self._endpoint

    async def resolve(self) -> str:
        if self._endpoint is not None:
            return self._endpoint
        # Concurrent first callers may both fetch; the first stored value wins.
        endpoint = await self._discover()
        with self._lock:
            if self._endpoint is None:
                self._endpoint = endpoint
                logger.info("resolved OpenID endpoint %s", endpoint)
            return self._endpoint

    def reset(self) -> None:
        with self._lock:
            self._endpoint = None

    async def _discover(self) -> str:
        logger.debug("fetching discovery document from %s", self.discovery_url)
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.get(self.discovery_url, headers={"Accept": XRDS_CONTENT_TYPE})
        except httpx.HTTPError as exc:
            raise DiscoveryTransportError(
                "Failed to fetch discovery document",
                description=str(exc),
            ) from exc

        if resp.status_code >= 300:
            raise DiscoveryError(
                "Discovery document request failed",
                status_code=resp.status_code,
                description=resp.text[:200],
            )

        uri = parse_xrds(resp.content)
        try:
            validate_absolute(uri)
        except UrlError as exc:
            raise DiscoveryError("Discovery document advertises an invalid endpoint", description=uri) from exc
        if not uri.lower().startswith(("http://", "https://")):
            raise DiscoveryError("Discovery document advertises a non-HTTP endpoint", description=uri)
        return uri


def parse_xrds(document: bytes | str) -> str:
    """Extract the service URI at ``XRD > Service > URI`` from an XRDS document.

    A service typed as an OP identifier is preferred; otherwise the first
    service with a URI is used.
    """
    try:
        root = ET.fromstring(document)
    except ET.ParseError as exc:
        raise DiscoveryError("Malformed discovery document", description=str(exc)) from exc

    fallback: Optional[str] = None
    for service in _services(root):
        uri = _child_text(service, "URI")
        if not uri:
            continue
        types = [el.text for el in service if _local(el.tag) == "Type"]
        if OP_SERVER_TYPE in types:
            return uri
        if fallback is None:
            fallback = uri

    if fallback is None:
        raise DiscoveryError("Discovery document has no service URI")
    return fallback


def _services(root: ET.Element) -> Iterator[ET.Element]:
    xrds = [root] if _local(root.tag) == "XRD" else [el for el in root if _local(el.tag) == "XRD"]
    for xrd in xrds:
        for el in xrd:
            if _local(el.tag) == "Service":
                yield el


def _child_text(element: ET.Element, name: str) -> Optional[str]:
    for el in element:
        if _local(el.tag) == name and el.text and el.text.strip():
            return el.text.strip()
    return None


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]
