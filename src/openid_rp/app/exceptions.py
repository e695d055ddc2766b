from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from openid_rp.errors import (
    DiscoveryError,
    FormParseError,
    OpenIDError,
    ProtocolError,
    TransportError,
    UrlError,
)

logger = logging.getLogger(__name__)


def status_for(exc: OpenIDError) -> int:
    if isinstance(exc, (UrlError, FormParseError)):
        return 400
    if isinstance(exc, (DiscoveryError, TransportError, ProtocolError)):
        return 502
    return 500


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(OpenIDError)
    async def openid_error_handler(request: Request, exc: OpenIDError):
        status_code = status_for(exc)
        logger.warning(
            "%s: %s (%s)",
            type(exc).__name__,
            exc,
            exc.description,
            extra={"method": request.method, "path": request.url.path},
        )
        return JSONResponse(
            status_code=status_code,
            content={"detail": str(exc), "error": type(exc).__name__},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("unhandled error", extra={"method": request.method, "path": request.url.path})
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
