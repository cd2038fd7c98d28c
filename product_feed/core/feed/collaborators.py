"""
Interfaces of the commerce backend the feed builder depends on.
"""

from typing import Dict, List, Protocol, Sequence

from .models import PricingContext, Product, Region


# Fields requested for every catalog page
PRODUCT_FIELDS = [
    "id",
    "title",
    "description",
    "handle",
    "thumbnail",
    "images.url",
    "material",
    "type.value",
    "sales_channels.id",
    "variants.id",
    "variants.sku",
    "variants.options.value",
    "variants.options.option.title",
    "variants.calculated_price.original_amount",
    "variants.calculated_price.calculated_amount",
]


class RegionResolver(Protocol):
    async def list_regions(self) -> List[Region]:
        ...


class CatalogQuery(Protocol):
    async def count_products(self) -> int:
        ...

    async def fetch_product_page(
        self,
        fields: Sequence[str],
        context: PricingContext,
        offset: int,
        take: int
    ) -> List[Product]:
        """Fetch one page of products with variants priced under ``context``."""
        ...


class AvailabilityLookup(Protocol):
    async def get_availability(
        self,
        variant_ids: List[str],
        sales_channel_id: str
    ) -> Dict[str, Dict[str, int]]:
        """Return {variant_id: {"quantity": n}} for one sales channel."""
        ...
