"""
Configuration management for the Product Feed API.
"""

from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field

from product_feed.core.feed.models import FeedHooks, FeedOptions


class Settings(BaseSettings):
    """Application settings."""

    # Feed channel metadata
    feed_title: str = Field(
        default="Product Feed",
        env="FEED_TITLE"
    )
    feed_link: str = Field(
        default="https://example.com",
        env="FEED_LINK"
    )
    feed_description: str = Field(
        default="A feed of products from our store",
        env="FEED_DESCRIPTION"
    )
    feed_brand: Optional[str] = Field(
        default=None,
        env="FEED_BRAND"
    )

    # Build tuning
    feed_batch_size: int = Field(
        default=50,
        env="FEED_BATCH_SIZE"
    )
    feed_include_fields: Optional[str] = Field(
        default=None,
        env="FEED_INCLUDE_FIELDS"
    )
    feed_exclude_fields: Optional[str] = Field(
        default=None,
        env="FEED_EXCLUDE_FIELDS"
    )

    # Commerce backend
    catalog_url: str = Field(
        default="http://localhost:9000",
        env="CATALOG_URL"
    )
    catalog_api_key: Optional[str] = Field(
        default=None,
        env="CATALOG_API_KEY"
    )
    catalog_timeout: float = Field(
        default=30.0,
        env="CATALOG_TIMEOUT"
    )
    catalog_rate_limit_rps: float = Field(
        default=10.0,
        env="CATALOG_RATE_LIMIT_RPS"
    )

    log_level: str = Field(
        default="INFO",
        env="LOG_LEVEL"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False


_settings = Settings()


def parse_field_list(value: Optional[str]) -> Optional[List[str]]:
    """Split a comma-separated field list; blank -> None."""
    if not value:
        return None
    fields = [f.strip() for f in value.split(",") if f.strip()]
    return fields or None


def build_feed_options(settings: Settings) -> FeedOptions:
    return FeedOptions(
        title=settings.feed_title,
        link=settings.feed_link.rstrip("/"),
        description=settings.feed_description,
        brand=settings.feed_brand or None,
    )


def build_feed_hooks(settings: Settings) -> FeedHooks:
    return FeedHooks(
        include_fields=parse_field_list(settings.feed_include_fields),
        exclude_fields=parse_field_list(settings.feed_exclude_fields),
    )


_feed_options = build_feed_options(_settings)


def get_settings() -> Settings:
    """Get application settings."""
    return _settings


def get_feed_options() -> FeedOptions:
    """Get the process-wide feed options (built once at import)."""
    return _feed_options
