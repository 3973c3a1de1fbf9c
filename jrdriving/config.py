# jrdriving/config.py
"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
The Settings object is frozen: build it once at startup and pass it to create_app().
"""

from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings

DEFAULT_JWT_SECRET = "change-me"


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    ENVIRONMENT: str = "development"

    # ── Database ──────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite:///./jrdriving.db"

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_HOST: str = "0.0.0.0"
    BACKEND_PORT: int = 4000
    API_PREFIX: str = "/api"
    CORS_ORIGINS: str = ""          # comma separated, empty = no cross-origin access

    # ── Security ──────────────────────────────────────────────────────────
    JWT_SECRET: str = DEFAULT_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    JWT_TTL_SECONDS: int = 60 * 60 * 24 * 7      # 7 days
    AUTH_COOKIE_NAME: str = "jrdriving_token"
    AUTH_COOKIE_MAX_AGE: int = 60 * 60 * 24 * 7  # seconds
    PASSWORD_RESET_TTL_MINUTES: int = 30

    # ── Webhooks (comma separated URL lists) ──────────────────────────────
    QUOTE_WEBHOOKS: str = ""
    DRIVER_APPLICATION_WEBHOOKS: str = ""
    MISSION_STATUS_WEBHOOKS: str = ""
    PASSWORD_RESET_WEBHOOKS: str = ""
    WEBHOOK_TIMEOUT_SECONDS: float = 10.0

    # ── Uploads ───────────────────────────────────────────────────────────
    ATTACHMENT_MAX_BYTES: int = 5 * 1024 * 1024

    # ── Dashboard thresholds ──────────────────────────────────────────────
    PENDING_QUOTES_ALERT_THRESHOLD: int = 10     # advise when strictly above
    DRIVER_LOAD_RATIO: int = 3                   # active missions per driver
    PUNCTUALITY_TARGET: int = 95                 # percent

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = "logs/jrdriving.log"   # empty disables file logging

    class Config:
        env_file = ".env"
        extra = "ignore"
        frozen = True

    @model_validator(mode="after")
    def _check_production_secrets(self):
        if self.is_production and self.JWT_SECRET == DEFAULT_JWT_SECRET:
            raise ValueError("JWT_SECRET must be set to a strong value in production")
        return self

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def cors_origins(self) -> list[str]:
        return _split_csv(self.CORS_ORIGINS)

    @property
    def WEBHOOKS(self) -> dict:
        return {
            "quote_created": _split_csv(self.QUOTE_WEBHOOKS),
            "driver_application": _split_csv(self.DRIVER_APPLICATION_WEBHOOKS),
            "mission_status": _split_csv(self.MISSION_STATUS_WEBHOOKS),
            "password_reset": _split_csv(self.PASSWORD_RESET_WEBHOOKS),
        }
