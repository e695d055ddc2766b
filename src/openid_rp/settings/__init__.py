from openid_rp.settings.config import OpenIDSettings, Settings, get_settings

__all__ = ["OpenIDSettings", "Settings", "get_settings"]
