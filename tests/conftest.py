import pytest

from openid_rp.clients import EndpointResolver, HttpOpenIDClient
from openid_rp.nonces import NonceCache
from openid_rp.settings import OpenIDSettings, Settings

DISCOVERY_URL = "https://op.example.com/accounts/o8/id"
OP_ENDPOINT = "https://op.example.com/accounts/o8/ud"

XRDS = b"""<?xml version="1.0" encoding="UTF-8"?>
<xrds:XRDS xmlns:xrds="xri://$xrds" xmlns="xri://$xrd*($v*2.0)">
  <XRD>
  <Service priority="0">
  <Type>http://specs.openid.net/auth/2.0/server</Type>
  <Type>http://openid.net/srv/ax/1.0</Type>
  <URI>https://op.example.com/accounts/o8/ud</URI>
  </Service>
  </XRD>
</xrds:XRDS>
"""

VALID_BODY = "ns:http://specs.openid.net/auth/2.0\nis_valid:true\n"
INVALID_BODY = "ns:http://specs.openid.net/auth/2.0\nis_valid:false\n"


def xrds_for(uri: str) -> bytes:
    return XRDS.replace(OP_ENDPOINT.encode(), uri.encode())


def assertion(nonce: str = "2026-10-19T10:00:00ZabcDEF", **extra: str) -> list[tuple[str, str]]:
    pairs = [
        ("openid.ns", "http://specs.openid.net/auth/2.0"),
        ("openid.mode", "id_res"),
        ("openid.op_endpoint", OP_ENDPOINT),
        ("openid.claimed_id", "https://op.example.com/id?id=42"),
        ("openid.identity", "https://op.example.com/id?id=42"),
        ("openid.return_to", "http://rp.example.com/openid?openid.secondary_return_to=%2Faccount"),
        ("openid.response_nonce", nonce),
        ("openid.assoc_handle", "AOQobUe"),
        ("openid.signed", "op_endpoint,claimed_id,identity,return_to,response_nonce,assoc_handle"),
        ("openid.sig", "c2lnbmF0dXJl"),
        ("openid.ext1.value.email", "user@example.com"),
        ("openid.secondary_return_to", "/account"),
    ]
    pairs.extend(extra.items())
    return pairs


@pytest.fixture
def settings() -> Settings:
    return Settings(openid=OpenIDSettings(discovery_url=DISCOVERY_URL, nonce_capacity=1000))


@pytest.fixture
def client() -> HttpOpenIDClient:
    return HttpOpenIDClient(EndpointResolver(DISCOVERY_URL), NonceCache(1000))
