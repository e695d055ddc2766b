"""OpenID 2.0 relying party: discovery, auth requests and direct verification."""
from openid_rp.clients import HttpOpenIDClient, VerificationResult
from openid_rp.nonces import NonceCache
from openid_rp.urls import compose

__all__ = ["HttpOpenIDClient", "NonceCache", "VerificationResult", "compose"]
