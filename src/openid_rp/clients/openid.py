from __future__ import annotations

import logging
from typing import List, Mapping, Optional, Tuple
from urllib.parse import urlencode

import httpx

from openid_rp.clients.discovery import EndpointResolver
from openid_rp.clients.types import CallbackParams, VerificationResult
from openid_rp.errors import ProtocolError, TransportError
from openid_rp.nonces import NonceCache
from openid_rp.settings import Settings, get_settings
from openid_rp.urls import compose, parse_url

logger = logging.getLogger(__name__)

OPENID_NS = "http://specs.openid.net/auth/2.0"
IDENTIFIER_SELECT = "http://specs.openid.net/auth/2.0/identifier_select"
AX_NS = "http://openid.net/srv/ax/1.0"
AX_EMAIL_TYPE = "http://axschema.org/contact/email"

MODE_CHECKID_SETUP = "checkid_setup"
MODE_CHECK_AUTHENTICATION = "check_authentication"

EMAIL_KEY = "openid.ext1.value.email"
SECONDARY_RETURN_TO_KEY = "openid.secondary_return_to"
NONCE_KEY = "openid.response_nonce"
MODE_KEY = "openid.mode"


class HttpOpenIDClient:
    """OpenID 2.0 relying party that verifies every assertion with the provider."""

    def __init__(
        self,
        resolver: EndpointResolver,
        nonces: NonceCache,
        *,
        callback_path: str = "/openid",
        timeout: float = 10.0,
    ) -> None:
        self._resolver = resolver
        self._nonces = nonces
        self._callback_path = callback_path
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "HttpOpenIDClient":
        s = settings or get_settings()
        return cls(
            EndpointResolver(s.openid.discovery_url, timeout=s.openid.http_timeout),
            NonceCache(s.openid.nonce_capacity),
            callback_path=s.openid.callback_path,
            timeout=s.openid.http_timeout,
        )

    @property
    def resolver(self) -> EndpointResolver:
        return self._resolver

    @property
    def nonces(self) -> NonceCache:
        return self._nonces

    async def build_auth_url(self, request_host: str, return_to: str, *, scheme: str = "http") -> str:
        endpoint = await self._resolver.resolve()
        callback = f"{scheme}://{request_host}{self._callback_path}?" + urlencode(
            {SECONDARY_RETURN_TO_KEY: return_to}
        )
        params: List[Tuple[str, str]] = [
            (MODE_KEY, MODE_CHECKID_SETUP),
            ("openid.ns", OPENID_NS),
            ("openid.return_to", callback),
            ("openid.claimed_id", IDENTIFIER_SELECT),
            ("openid.identity", IDENTIFIER_SELECT),
            ("openid.ns.ax", AX_NS),
            ("openid.ax.mode", "fetch_request"),
            ("openid.ax.required", "email"),
            ("openid.ax.type.email", AX_EMAIL_TYPE),
        ]
        return compose(endpoint, params)

    async def verify_callback(self, params: CallbackParams) -> VerificationResult:
        endpoint = await self._resolver.resolve()

        identity: Optional[str] = None
        return_to: Optional[str] = None
        nonce: Optional[str] = None
        forwarded: List[Tuple[str, str]] = []
        for key, value in _items(params):
            if key == EMAIL_KEY:
                identity = value
            elif key == SECONDARY_RETURN_TO_KEY:
                return_to = parse_url(value)
            elif key == NONCE_KEY:
                nonce = value
            if key != MODE_KEY:
                forwarded.append((key, value))
        forwarded.append((MODE_KEY, MODE_CHECK_AUTHENTICATION))

        url = compose(endpoint, forwarded)
        body = await self._check_authentication(url)
        response = parse_kv_form(body)

        for key, value in response:
            if key == "ns" and value != OPENID_NS:
                raise ProtocolError(f"Unknown namespace: {value}", details=dict(response))

        # Conflicting is_valid lines count as a rejection.
        verdicts = [value for key, value in response if key == "is_valid"]
        ok = False
        if not verdicts or any(v != "true" for v in verdicts):
            logger.info("provider rejected assertion for %s", identity)
        elif not nonce:
            logger.warning("valid assertion without response nonce rejected")
        elif not self._nonces.add(nonce):
            logger.warning("replayed response nonce %s...", nonce[:12])
        else:
            ok = True
            logger.info("verified OpenID login for %s", identity)
        return VerificationResult(return_to=return_to, identity=identity, ok=ok)

    async def _check_authentication(self, url: str) -> str:
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.get(url)
        except httpx.HTTPError as exc:
            raise TransportError("Network error during direct verification", description=str(exc)) from exc

        if resp.status_code >= 300:
            raise TransportError(
                "Direct verification failed",
                status_code=resp.status_code,
                description=resp.text[:200],
            )
        return resp.text


def parse_kv_form(body: str) -> List[Tuple[str, str]]:
    """Parse an OpenID key-value form (``key:value`` per line).

    Pairs are returned in order with duplicates kept. Lines end at ``\\n``;
    a trailing ``\\r`` is dropped.
    """
    result: List[Tuple[str, str]] = []
    for line in body.split("\n"):
        key, sep, value = line.rstrip("\r").partition(":")
        if sep:
            result.append((key, value))
    return result


def _items(params: CallbackParams) -> List[Tuple[str, str]]:
    if isinstance(params, Mapping):
        pairs: List[Tuple[str, str]] = []
        for key, value in params.items():
            if isinstance(value, (list, tuple)):
                pairs.extend((key, v) for v in value)
            else:
                pairs.append((key, value))
        return pairs
    return list(params)
