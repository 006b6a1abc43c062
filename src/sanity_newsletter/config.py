"""Configuration management via environment variables."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration loaded from environment variables.

    Every value has a default so the feed can be built against the public
    dataset without any environment set up. Variables that are set but
    empty fall back to the default too.
    """

    model_config = SettingsConfigDict(env_ignore_empty=True)

    sanity_project_id: str = "qwsgqgyz"
    sanity_dataset: str = "production"
    sanity_api_version: str = "v2025-01-01"
    sanity_token: str | None = None
    site_url: str = "https://paceflow.io"
    rss_output_path: str = "docs/newsletter/rss.xml"
    feed_title: str = "Paceflow Newsletter"
    feed_description: str = "Latest newsletters and product updates from Paceflow"

    @field_validator("sanity_project_id", "sanity_dataset", "sanity_api_version")
    @classmethod
    def must_not_be_empty(cls, v: str) -> str:
        """Reject empty or whitespace-only values."""
        if not v or not v.strip():
            raise ValueError("must not be empty or whitespace")
        return v.strip()

    @field_validator("sanity_token")
    @classmethod
    def blank_token_is_none(cls, v: str | None) -> str | None:
        """Treat an empty token as no token at all."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("site_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")
