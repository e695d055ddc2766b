from openid_rp.api.openid import callback as openid_callback
from openid_rp.api.openid import router as openid_router
from openid_rp.api.system import router as system_router

__all__ = ["openid_callback", "openid_router", "system_router"]
