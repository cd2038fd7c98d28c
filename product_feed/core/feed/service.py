"""
Feed generation service - orchestrates the entire feed build.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from .availability import resolve_availability
from .collaborators import PRODUCT_FIELDS, AvailabilityLookup, CatalogQuery, RegionResolver
from .mapper import map_batch
from .models import FeedHooks, FeedItem, FeedMode, FeedOptions, PricingContext
from .pagination import DEFAULT_BATCH_SIZE, batch_count, effective_batch_size, paginate
from .regions import resolve_pricing_context
from .xml_writer import build_rss_tree, write_feed_xml

logger = logging.getLogger(__name__)


def assemble_feed(
    items: List[FeedItem],
    options: FeedOptions,
    mode: FeedMode
) -> Union[List[FeedItem], Dict[str, Any]]:
    """JSON mode returns the items as-is; XML mode wraps them in the RSS envelope."""
    if mode == "xml":
        return build_rss_tree(items, options)
    return items


class ProductFeedService:
    """
    Builds product feeds from the commerce backend.

    Each build resolves one pricing context, then fetches, maps and
    accumulates the catalog one batch at a time.
    """

    def __init__(
        self,
        regions: RegionResolver,
        catalog: CatalogQuery,
        availability: AvailabilityLookup,
        options: Optional[FeedOptions] = None,
        batch_size: int = DEFAULT_BATCH_SIZE
    ):
        """
        Initialize feed service.

        Args:
            regions: Region source for pricing context selection
            catalog: Product count and page queries
            availability: Per-sales-channel availability lookup
            options: Feed channel metadata (read-only)
            batch_size: Products per catalog fetch when no page size is given
        """
        self.regions = regions
        self.catalog = catalog
        self.availability = availability
        self.options = options or FeedOptions()
        self.batch_size = batch_size

    def get_options(self) -> FeedOptions:
        return self.options

    async def resolve_context(
        self,
        region_id: Optional[str] = None,
        country_code: Optional[str] = None,
        currency_code: Optional[str] = None
    ) -> PricingContext:
        """
        Raises:
            NoRegionsConfigured: If the backend has no regions.
            RegionNotFound: If a requested region/country/currency has no match.
        """
        regions = await self.regions.list_regions()
        return resolve_pricing_context(regions, region_id, country_code, currency_code)

    async def build_mapped_feed_data(
        self,
        region_id: Optional[str] = None,
        country_code: Optional[str] = None,
        currency_code: Optional[str] = None,
        mode: FeedMode = "json",
        google_merchant: bool = False,
        hooks: Optional[FeedHooks] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
        batch_size: Optional[int] = None
    ) -> List[FeedItem]:
        """
        Build mapped feed items for products/variants with region-based pricing.

        Args:
            region_id / country_code / currency_code: Pricing context selection
            mode: "json" for plain keys, "xml" for the Merchant item shape
            google_merchant: In XML mode, prefix keys with ``g:``
            hooks: Optional transform / include / exclude stage
            page: Only process this 1-based page of products
            page_size: Products per page (overrides the batch size)
            batch_size: Override the service's batch size for this build

        Returns:
            Items in catalog order (product, then variant)

        Raises:
            FeedError subclasses; nothing partial is returned on failure.
        """
        context = await self.resolve_context(region_id, country_code, currency_code)

        total = await self.catalog.count_products() or 0
        size = effective_batch_size(batch_size or self.batch_size, page_size)
        logger.info(
            f"Building {mode} feed | region={context.region_id} | currency={context.currency_code} | "
            f"products={total} | batch_size={size} | batches={batch_count(total, size)} | page={page}"
        )

        items: List[FeedItem] = []
        for batch in paginate(total, size, page):
            products = await self.catalog.fetch_product_page(PRODUCT_FIELDS, context, batch.offset, batch.take)
            availability = await resolve_availability(products, self.availability)
            batch_items = await map_batch(
                products,
                availability,
                context,
                self.options,
                mode=mode,
                namespace_prefix=google_merchant,
                hooks=hooks,
            )
            items.extend(batch_items)
            logger.debug(
                f"Batch {batch.index + 1}: {len(products)} products -> {len(batch_items)} items "
                f"(total {len(items)})"
            )

        logger.info(f"Feed build complete: {len(items)} items")
        return items

    async def build_feed(
        self,
        mode: FeedMode = "json",
        **kwargs
    ) -> Union[List[FeedItem], Dict[str, Any]]:
        """Build the items and assemble them for ``mode``."""
        items = await self.build_mapped_feed_data(mode=mode, **kwargs)
        return assemble_feed(items, self.options, mode)

    async def build_feed_xml(self, pretty: bool = True, **kwargs) -> str:
        """Build the XML feed and render it to text."""
        tree = await self.build_feed(mode="xml", **kwargs)
        return write_feed_xml(tree, pretty=pretty)
