"""Relay configuration loaded from environment variables."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Relay settings.

    ``buildkite_url`` and ``buildkite_auth_token`` have no defaults: building a
    ``Settings`` without them raises ``pydantic.ValidationError``, which is how
    the process refuses to start when they are missing.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
    )

    buildkite_url: str = Field(min_length=1)
    buildkite_auth_token: str = Field(min_length=1)
    buildkite_timeout: float = 30.0

    # Forwarded verbatim as the build's ``env`` / ``meta_data`` objects.
    buildkite_build_env: dict[str, str] = Field(default_factory=dict)
    buildkite_build_meta_data: dict[str, str] = Field(default_factory=dict)

    app_name: str = "vsts-buildkite-relay"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8080


@lru_cache
def get_settings() -> Settings:
    """Build the settings once and return the same instance afterwards."""
    return Settings()
