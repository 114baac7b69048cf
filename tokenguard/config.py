"""Token configuration using pydantic-settings.

Values are read from ``JWT_*`` environment variables or a ``.env`` file.
Components never read settings themselves; ``tokenguard.providers`` passes
the relevant values into their constructors.
"""

import warnings
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_SECRET = "CHANGE-ME-IN-PRODUCTION"


class Settings(BaseSettings):
    """Token settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="JWT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "staging", "production"] = "development"

    # Signing
    secret: str = Field(
        default=PLACEHOLDER_SECRET,
        description="HMAC signing secret. MUST be overridden in production.",
    )
    algo: str = "HS256"
    public_key: str | None = None
    private_key: str | None = None

    # Lifetimes
    ttl: int | None = 60  # minutes
    refresh_ttl: int | None = 20160  # minutes (2 weeks)
    leeway: int = 0  # seconds

    # Claims
    issuer: str | None = "tokenguard"
    required_claims: list[str] = Field(
        default_factory=lambda: ["iss", "iat", "exp", "nbf", "sub", "jti"]
    )
    persistent_claims: list[str] = Field(default_factory=list)
    lock_subject: bool = True

    # Blacklist
    blacklist_enabled: bool = True
    blacklist_grace_period: int = 0  # seconds
    blacklist_key_prefix: str = "tokenguard:blacklist:"
    redis_url: str = "redis://localhost:6379/0"

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    @field_validator("leeway", "blacklist_grace_period")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must not be negative")
        return v

    @field_validator("ttl", "refresh_ttl")
    @classmethod
    def validate_positive_ttl(cls, v: int | None) -> int | None:
        if v is not None and v <= 0:
            raise ValueError("must be a positive number of minutes, or null")
        return v

    @model_validator(mode="after")
    def validate_refresh_window(self) -> "Settings":
        """A token must stay refreshable at least until it expires."""
        if self.ttl is not None and self.refresh_ttl is not None and self.refresh_ttl < self.ttl:
            raise ValueError("refresh_ttl must be greater than or equal to ttl")
        return self

    @model_validator(mode="after")
    def enforce_secret_strength(self) -> "Settings":
        """Enforce secret requirements for HMAC algorithms based on environment.

        - Non-dev: reject the placeholder secret AND require >= 32 characters.
        - Dev: emit a warning for short secrets so local runs aren't blocked.
        """
        if not self.is_symmetric:
            if not self.public_key or not self.private_key:
                raise ValueError(f"{self.algo} requires both public_key and private_key")
            return self

        if self.environment != "development":
            if self.secret == PLACEHOLDER_SECRET:
                raise ValueError(
                    "secret must be changed from its default value "
                    "in staging/production environments"
                )
            if len(self.secret) < 32:
                raise ValueError(
                    "secret must be at least 32 characters in staging/production environments"
                )
        elif len(self.secret) < 32:
            warnings.warn(
                "JWT secret is shorter than 32 characters; "
                "use a strong, randomly-generated secret in production",
                UserWarning,
                stacklevel=2,
            )
        return self

    @property
    def is_symmetric(self) -> bool:
        return self.algo.upper().startswith("HS")

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
