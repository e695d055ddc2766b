from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from openid_rp.api import openid_callback, openid_router, system_router
from openid_rp.app.exceptions import register_exception_handlers
from openid_rp.app.logging_config import configure_logging
from openid_rp.app.metrics import instrument_metrics
from openid_rp.clients import HttpOpenIDClient
from openid_rp.middleware.request_id import RequestIDMiddleware
from openid_rp.settings import Settings, get_settings


def create_app(settings: Optional[Settings] = None, *, client: Optional[HttpOpenIDClient] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    One OpenID client (endpoint resolver plus nonce cache) is built per
    application and shared by every request through ``app.state``.

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="OpenID 2.0 relying party with direct verification",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        debug=settings.server.debug,
    )
    app.state.settings = settings
    app.state.openid_client = client or HttpOpenIDClient.from_settings(settings)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins(),
        allow_credentials=True,
        allow_methods=settings.cors.methods(),
        allow_headers=settings.cors.headers(),
    )

    # Sessions
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.openid.secret_key,
        session_cookie=settings.openid.session_cookie_name,
        same_site="lax",
        https_only=settings.openid.https_only,
    )

    # Routers
    app.include_router(system_router)
    app.include_router(openid_router)
    app.add_api_route(
        settings.openid.callback_path,
        openid_callback,
        methods=["GET", "POST"],
        tags=["openid"],
    )

    # Middleware
    app.add_middleware(RequestIDMiddleware)

    # Exceptions, logging, metrics
    register_exception_handlers(app)
    configure_logging(settings.logging.as_json, settings.server.log_level)
    instrument_metrics(app, app.state.openid_client.nonces)

    return app
