"""Application configuration using Pydantic BaseSettings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from searchbot.constants import (
    FACEBOOK_API_TIMEOUT_SECONDS,
    PAGE_FETCH_TIMEOUT_SECONDS,
    SEARCH_TIMEOUT_SECONDS,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Every value falls back to the .env files and then to config/default.json,
    so a deployment can ship a config file instead of exporting variables.
    """

    model_config = SettingsConfigDict(
        # Load .env first, then .env.local (for local/test overrides)
        # Later files override earlier ones, so .env.local takes precedence
        env_file=[".env", ".env.local"],
        env_file_encoding="utf-8",
        json_file="config/default.json",
        json_file_encoding="utf-8",
        case_sensitive=False,
        # Blank values (as in a copied .env.example) fall through to the next source
        env_ignore_empty=True,
        extra="ignore",
    )

    # Messenger Configuration
    messenger_app_secret: str = Field(
        ...,
        min_length=1,
        description="Facebook App secret used for signature verification",
    )
    messenger_validation_token: str = Field(
        ..., min_length=1, description="Webhook verification token"
    )
    messenger_page_access_token: str = Field(
        ..., min_length=1, description="Facebook Page access token"
    )
    messenger_require_signature: bool = Field(
        default=True,
        description="Reject webhook POSTs that carry no signature header",
    )

    # Public URL where the app is running (include protocol)
    server_url: str = Field(..., min_length=1, description="Public server base URL")

    # Search endpoint base; the raw query text is appended to it
    search_url: str = Field(..., min_length=1, description="Search API base URL")

    # Environment
    env: Literal["local", "railway", "prod"] = Field(
        default="local", description="Current environment"
    )
    log_level: str = Field(default="INFO", description="Python logging level")

    # Sentry Configuration
    sentry_dsn: str | None = Field(
        default=None, description="Sentry DSN for error tracking (optional)"
    )
    sentry_traces_sample_rate: float = Field(
        default=1.0, description="Sentry traces sample rate (0.0 to 1.0)"
    )

    # Logfire Configuration
    logfire_token: str | None = Field(
        default=None, description="Pydantic Logfire token for observability"
    )

    # ==========================================================================
    # Timeout Configuration
    # ==========================================================================
    # Defaults are sourced from searchbot/constants.py.

    search_timeout_seconds: float = Field(
        default=SEARCH_TIMEOUT_SECONDS,
        description="HTTP timeout for search API requests (seconds)",
    )
    page_fetch_timeout_seconds: float = Field(
        default=PAGE_FETCH_TIMEOUT_SECONDS,
        description="HTTP timeout for page fetches (seconds)",
    )
    facebook_api_timeout_seconds: float = Field(
        default=FACEBOOK_API_TIMEOUT_SECONDS,
        description="Timeout for Facebook Graph API calls (seconds)",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Config file is the last resort, after env vars and .env files
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
            JsonConfigSettingsSource(settings_cls),
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
