from __future__ import annotations

from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version as pkg_version
from typing import List, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

GOOGLE_DISCOVERY_URL = "https://www.google.com/accounts/o8/id"
MAX_OLD_NONCES = 100_000


def _package_version(default: str = "0.1.0") -> str:
    try:
        return pkg_version("openid-rp")
    except PackageNotFoundError:
        return default


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    reload: bool = False
    log_level: Literal["critical", "error", "warning", "info", "debug", "trace"] = "info"


class CorsSettings(BaseModel):
    allow_origins: str = "*"  # comma-separated or "*"
    allow_methods: str = "GET,POST"  # comma-separated
    allow_headers: str = "*"  # comma-separated or "*"

    def origins(self) -> List[str]:
        return _split(self.allow_origins, wildcard=True)

    def methods(self) -> List[str]:
        return [m.upper() for m in _split(self.allow_methods)]

    def headers(self) -> List[str]:
        return _split(self.allow_headers, wildcard=True)


class OpenIDSettings(BaseModel):
    # Provider discovery (XRDS document advertising the OP endpoint)
    discovery_url: str = GOOGLE_DISCOVERY_URL

    # Where the provider sends the browser back to
    callback_path: str = "/openid"

    # Replay protection
    nonce_capacity: int = MAX_OLD_NONCES

    # Outbound requests (discovery and direct verification)
    http_timeout: float = 10.0

    # Sessions
    secret_key: str = "dev-secret-change-me"
    session_cookie_name: str = "openid_rp_session"
    https_only: bool = False

    @field_validator("callback_path")
    @classmethod
    def _absolute_path(cls, value: str) -> str:
        if not value.startswith("/"):
            return "/" + value
        return value

    @field_validator("nonce_capacity")
    @classmethod
    def _positive_capacity(cls, value: int) -> int:
        if value < 1:
            raise ValueError("nonce_capacity must be positive")
        return value


class LoggingSettings(BaseModel):
    as_json: bool = False


class Settings(BaseSettings):
    """Application settings loaded from environment (and .env)."""

    app_name: str = "OpenID Relying Party"
    app_version: str = Field(default_factory=_package_version)

    server: ServerSettings = ServerSettings()
    cors: CorsSettings = CorsSettings()
    openid: OpenIDSettings = OpenIDSettings()
    logging: LoggingSettings = LoggingSettings()

    model_config = SettingsConfigDict(
        env_prefix="OPENID_RP_",
        env_nested_delimiter="__",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def _split(value: str, *, wildcard: bool = False) -> List[str]:
    value = value.strip()
    if wildcard and value in ("", "*"):
        return ["*"]
    return [part.strip() for part in value.split(",") if part.strip()]
