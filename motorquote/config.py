"""Application configuration via pydantic-settings.

Values are loaded from environment variables (.env file).
Settings are organized into logical groups and composed into a single Settings object.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreSettings(BaseSettings):
    """Key-value persistence backend."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    store_backend: str = Field(
        default="memory",
        description="Persistence backend: 'memory' or 'redis'",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection string",
    )

    @field_validator("store_backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        lower = v.lower()
        if lower not in {"memory", "redis"}:
            msg = f"Invalid store backend: {v}. Must be 'memory' or 'redis'"
            raise ValueError(msg)
        return lower


class QuoteSettings(BaseSettings):
    """Full quote generation."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    quote_validity_days: int = Field(default=30, description="Days a quote stays valid")
    quote_latency_seconds: float = Field(
        default=1.0,
        description="Simulated network delay before a full quote resolves",
    )
    quote_history_limit: int = Field(default=10, description="Quotes kept in history")


class PreviewSettings(BaseSettings):
    """Debounce windows for the two live recalculation call sites."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    preview_card_debounce_ms: int = Field(default=500, description="Quick preview card quiescence window")
    full_quote_debounce_ms: int = Field(default=800, description="Debounced full quote quiescence window")


class FormSettings(BaseSettings):
    """Multi-step form persistence."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    form_session_key: str = Field(default="motor_insurance_form_data")
    form_session_ttl_hours: int = Field(default=24, description="Persisted form freshness window")


class CheckoutSettings(BaseSettings):
    """Simulated checkout."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    payment_latency_seconds: float = Field(
        default=3.0,
        description="Simulated payment processing delay",
    )
    payment_history_limit: int = Field(default=20, description="Payments kept in history")


class BrandingSettings(BaseSettings):
    """Branding and locale constants."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = Field(default="Motor Quote")
    insurer_name: str = Field(default="Hobbiton Insurance")
    currency: str = Field(default="ZMW")


class Settings(BaseSettings):
    """Root settings composing all sub-settings.

    Usage:
        settings = Settings()
        settings.store.redis_url
        settings.preview.preview_card_debounce_ms
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    # Composed settings (loaded from same .env)
    store: StoreSettings = Field(default_factory=StoreSettings)
    quote: QuoteSettings = Field(default_factory=QuoteSettings)
    preview: PreviewSettings = Field(default_factory=PreviewSettings)
    form: FormSettings = Field(default_factory=FormSettings)
    checkout: CheckoutSettings = Field(default_factory=CheckoutSettings)
    branding: BrandingSettings = Field(default_factory=BrandingSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            msg = f"Invalid log level: {v}. Must be one of {valid}"
            raise ValueError(msg)
        return upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


# Module-level singleton. Import this wherever settings are needed.
settings = Settings()
