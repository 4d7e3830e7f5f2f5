"""Runtime settings loaded from ``SALESDESK_*`` environment variables or a ``.env`` file."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_SLUG_LENGTH = 50
MAX_TITLE_LENGTH = 70
MAX_SUBTITLE_LENGTH = 120


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SALESDESK_",
        env_file=".env",
        extra="ignore",
    )

    default_currency: str = Field(
        default="USD",
        description="Store currency for new pages and fallback visitor currency.",
    )
    base_domain: str = Field(
        default="nexu.fbo.com",
        description="Host that serves published pages under /p/{slug}.",
    )
    geolocation_url: str = Field(
        default="https://ipapi.co/{ip}/currency/",
        description="Geolocation endpoint; {ip} is replaced by the visitor address.",
    )
    geolocation_self_url: str = Field(
        default="https://ipapi.co/currency/",
        description="Geolocation endpoint used when no visitor address is known.",
    )
    exchange_rate_url: str = Field(
        default="https://open.er-api.com/v6/latest/{base}",
        description="Rate-table endpoint; {base} is replaced by the source currency.",
    )
    qr_endpoint: str = Field(
        default="https://api.qrserver.com/v1/create-qr-code/",
        description="External image service that renders QR codes for a URL.",
    )
    geolocation_timeout: float = Field(default=3.0, gt=0)
    exchange_rate_timeout: float = Field(default=5.0, gt=0)
    rate_cache_ttl: float = Field(
        default=3600.0,
        gt=0,
        description="Seconds an exchange rate stays cached.",
    )
    log_level: str = "INFO"

    @field_validator("default_currency")
    @classmethod
    def _upper_currency(cls, value: str) -> str:
        value = value.strip().upper()
        if len(value) != 3 or not value.isalpha():
            raise ValueError("default_currency must be a three-letter code")
        return value

    @field_validator("log_level")
    @classmethod
    def _valid_level(cls, value: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if value.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return value.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings()
