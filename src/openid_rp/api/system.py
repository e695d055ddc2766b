from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from openid_rp.clients import HttpOpenIDClient, get_openid_client


router = APIRouter(tags=["system"])

# Resolve templates directory relative to package root
BASE_DIR = Path(__file__).resolve().parents[1]
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


@router.get("/health")
async def health_check(client: HttpOpenIDClient = Depends(get_openid_client)) -> dict:
    return {
        "status": "healthy",
        "service": "openid-rp",
        "nonce_cache_size": client.nonces.size(),
    }


@router.get("/", response_class=HTMLResponse)
async def index(request: Request):
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "identity": request.session.get("identity"),
            "auth_error": request.session.get("auth_error"),
        },
    )
