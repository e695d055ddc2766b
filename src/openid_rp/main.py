"""
Main entry point for the OpenID relying party service.
"""
import logging

from dotenv import load_dotenv
import uvicorn
from openid_rp.app import create_app
from openid_rp.settings import get_settings

# Load environment variables from a .env file if present
load_dotenv()

# Create the FastAPI application
app = create_app()

logger = logging.getLogger("openid_rp")


def main() -> None:
    """Main entry point for running the application."""
    s = get_settings()
    logger.info(
        "starting %s on %s:%s (discovery %s, callback %s)",
        s.app_name,
        s.server.host,
        s.server.port,
        s.openid.discovery_url,
        s.openid.callback_path,
    )
    if not s.openid.https_only:
        logger.warning("session cookies are not restricted to HTTPS; set OPENID_RP_OPENID__HTTPS_ONLY=true in production")

    uvicorn.run(
        "openid_rp.main:app",
        host=s.server.host,
        port=s.server.port,
        reload=s.server.reload,
        log_level=s.server.log_level,
    )


if __name__ == "__main__":
    main()
