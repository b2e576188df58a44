from __future__ import annotations

from pydantic_settings import BaseSettings

from goxclient.io.mtgox.currency import DEFAULT_CURRENCY
from goxclient.io.mtgox.paths import BASE_URL


class Settings(BaseSettings):
    MTGOX_API_KEY: str | None = None
    MTGOX_API_SECRET: str | None = None
    MTGOX_API_VERSION: int = 2
    # Keep raw env as string; the client normalizes and rejects unknown codes
    MTGOX_CURRENCY: str = DEFAULT_CURRENCY
    MTGOX_BASE_URL: str = BASE_URL
    # Off by default; see the security caveat in README.md
    MTGOX_VERIFY_TLS: bool = False
    MTGOX_TIMEOUT: float = 10.0

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()
