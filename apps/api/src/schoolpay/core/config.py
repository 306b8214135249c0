"""
Application Settings

Settings are loaded from environment variables (and an optional .env file)
using pydantic-settings. Defaults are suitable for local development only;
production deployments must set secrets explicitly.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_JWT_SECRET = "dev-only-jwt-secret-change-me"


class Settings(BaseSettings):
    """
    Runtime configuration for the SchoolPay API.

    Environment variables use the upper-case field name, e.g. JWT_SECRET,
    PAYSTACK_SECRET_KEY, STORAGE_BACKEND.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Runtime
    python_env: Literal["development", "production", "test"] = "development"
    port: int = Field(default=8080, ge=1, le=65535)
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000"

    # Bearer tokens
    jwt_secret: str = DEV_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_hours: int = Field(default=24, ge=1)

    # Paystack
    paystack_secret_key: str = ""
    paystack_webhook_secret: str | None = None
    paystack_base_url: str = "https://api.paystack.co"
    paystack_timeout_seconds: float | None = None
    payment_amount_kobo: int = Field(default=500_000, gt=0)  # NGN 5000
    payment_reference_prefix: str = "SCH-"

    # Storage
    storage_backend: Literal["memory", "sql"] = "memory"
    database_url: str = "sqlite+aiosqlite:///./schoolpay.db"

    @model_validator(mode="after")
    def validate_production_secrets(self) -> "Settings":
        """Refuse to boot production with the development JWT secret."""
        if self.python_env == "production" and self.jwt_secret == DEV_JWT_SECRET:
            raise ValueError("JWT_SECRET must be set in production")
        return self

    @property
    def is_development(self) -> bool:
        return self.python_env == "development"

    @property
    def is_production(self) -> bool:
        return self.python_env == "production"

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def webhook_secret(self) -> str:
        """Secret used to sign webhooks (Paystack signs with the API secret key)."""
        return self.paystack_webhook_secret or self.paystack_secret_key


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()


settings = get_settings()
