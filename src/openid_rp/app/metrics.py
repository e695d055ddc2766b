from __future__ import annotations

import logging

from fastapi import FastAPI
from prometheus_client import Gauge

from openid_rp.nonces import NonceCache

logger = logging.getLogger(__name__)

NONCE_CACHE_ENTRIES = Gauge(
    "openid_rp_nonce_cache_entries",
    "Response nonces currently remembered for replay protection",
)


def instrument_metrics(app: FastAPI, nonces: NonceCache) -> None:
    NONCE_CACHE_ENTRIES.set_function(nonces.size)
    try:
        from prometheus_fastapi_instrumentator import Instrumentator

        Instrumentator().instrument(app).expose(app, endpoint="/metrics")
    except Exception:
        # Request metrics are optional; the nonce gauge is still registered
        logger.warning("HTTP request metrics disabled", exc_info=True)
