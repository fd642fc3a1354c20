"""Storefront-Engine configuration via pydantic-settings."""

import warnings
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_DEFAULTS = {
    "secret_key": "insecure-dev-key-change-me",
}


class StorefrontSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STOREFRONT_")

    environment: str = "development"
    secret_key: str = "insecure-dev-key-change-me"
    log_level: str = "INFO"

    # Database
    db_url: str = "sqlite+aiosqlite:///./data/storefront.db"

    # API
    api_title: str = "Storefront-Engine"
    api_version: str = "0.1.0"
    host: str = "0.0.0.0"
    port: int = 8080
    api_prefix: str = ""
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Identity provider. "local" keeps identities in our own database and
    # signs tokens with secret_key; "remote" talks to a GoTrue-compatible API.
    identity_backend: Literal["local", "remote"] = "local"
    identity_url: str = ""
    identity_anon_key: str = ""
    identity_service_key: str = ""
    identity_timeout: float = 10.0  # seconds

    # Local token lifetimes
    access_token_ttl: int = 3600  # 1 hour
    refresh_token_ttl: int = 1209600  # 14 days

    # Catalog
    strict_attributes: bool = False

    def validate_for_production(self) -> None:
        """Raise if insecure defaults are used in non-development environments."""
        insecure_fields = [
            field
            for field, default in _INSECURE_DEFAULTS.items()
            if getattr(self, field) == default
        ]

        if self.environment != "development" and insecure_fields:
            env_vars = ", ".join(f"STOREFRONT_{f.upper()}" for f in insecure_fields)
            raise RuntimeError(
                f"Insecure default values detected in '{self.environment}' environment. "
                f"Set these environment variables to secure values: {env_vars}. "
                "Generate secrets with: python -c \"import secrets; print(secrets.token_urlsafe(48))\""
            )

        if self.identity_backend == "remote" and not self.identity_url:
            raise RuntimeError(
                "STOREFRONT_IDENTITY_URL must be set when STOREFRONT_IDENTITY_BACKEND=remote"
            )

        if insecure_fields:
            warnings.warn(
                "Using insecure default keys — set STOREFRONT_SECRET_KEY for production",
                UserWarning,
                stacklevel=2,
            )


@lru_cache
def get_settings() -> StorefrontSettings:
    settings = StorefrontSettings()
    settings.validate_for_production()
    return settings
