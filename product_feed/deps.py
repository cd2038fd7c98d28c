"""
Dependency injection for FastAPI.
"""

from typing import Optional

from product_feed.config import build_feed_hooks, get_feed_options, get_settings
from product_feed.core.catalog_client import CatalogClient
from product_feed.core.feed.models import FeedHooks
from product_feed.core.feed.service import ProductFeedService


_catalog_client: Optional[CatalogClient] = None


def get_catalog_client() -> CatalogClient:
    """Get catalog client (singleton)."""
    global _catalog_client
    if _catalog_client is None:
        settings = get_settings()
        _catalog_client = CatalogClient(
            base_url=settings.catalog_url,
            api_key=settings.catalog_api_key,
            rate_limit_rps=settings.catalog_rate_limit_rps,
            timeout=settings.catalog_timeout
        )
    return _catalog_client


async def close_catalog_client():
    """Close catalog client."""
    global _catalog_client
    if _catalog_client:
        await _catalog_client.close()
        _catalog_client = None


def get_feed_service() -> ProductFeedService:
    """Create a feed service bound to the shared catalog client."""
    client = get_catalog_client()
    return ProductFeedService(
        regions=client,
        catalog=client,
        availability=client,
        options=get_feed_options(),
        batch_size=get_settings().feed_batch_size
    )


def get_feed_hooks() -> FeedHooks:
    """Hooks configured through settings (field include/exclude lists)."""
    return build_feed_hooks(get_settings())
