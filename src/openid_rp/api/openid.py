from __future__ import annotations

import logging
from urllib.parse import urlsplit

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from openid_rp.clients import get_openid_client
from openid_rp.clients.forms import callback_params
from openid_rp.clients.types import OpenIDClient
from openid_rp.errors import OpenIDError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["openid"])

# Session keys
IDENTITY_KEY = "identity"
ERROR_KEY = "auth_error"


def _safe_return_to(request: Request, return_to: str | None) -> str:
    """Only follow return URLs that stay on this host."""
    if not return_to:
        return "/"
    parts = urlsplit(return_to)
    if not parts.scheme and not parts.netloc and return_to.startswith("/") and not return_to.startswith("//"):
        return return_to
    if parts.scheme in ("http", "https") and parts.netloc == request.url.netloc:
        return return_to
    logger.warning("ignoring off-site return_to %s", return_to)
    return "/"


@router.get("/login")
async def login(
    request: Request,
    return_to: str = "/",
    client: OpenIDClient = Depends(get_openid_client),
):
    auth_url = await client.build_auth_url(
        request.url.netloc,
        return_to,
        scheme=request.url.scheme,
    )
    return RedirectResponse(url=auth_url, status_code=302)


def _fail(request: Request, error: str, description: str) -> RedirectResponse:
    request.session.pop(IDENTITY_KEY, None)
    request.session[ERROR_KEY] = {"error": error, "error_description": description}
    return RedirectResponse(url="/", status_code=302)


async def callback(request: Request, client: OpenIDClient = Depends(get_openid_client)):
    try:
        params = await callback_params(request)
        result = await client.verify_callback(params)
    except OpenIDError as e:
        logger.warning("OpenID callback failed: %s (%s)", e, e.description)
        return _fail(request, type(e).__name__, str(e))

    if not result.ok:
        return _fail(
            request,
            "verification_failed",
            "The provider did not confirm this login or it was already used.",
        )
    if not result.identity:
        logger.warning("verified assertion carried no email attribute")
        return _fail(request, "missing_identity", "The provider did not release an email address.")

    request.session.pop(ERROR_KEY, None)
    request.session[IDENTITY_KEY] = result.identity
    return RedirectResponse(url=_safe_return_to(request, result.return_to), status_code=302)


@router.post("/logout")
@router.get("/logout")
async def logout(request: Request):
    request.session.clear()
    return RedirectResponse(url="/", status_code=303)
