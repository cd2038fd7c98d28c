"""Test fixtures for feed tests."""

from typing import Dict, List, Optional, Sequence

import pytest

from product_feed.core.feed.models import (
    Country,
    FeedOptions,
    OptionValue,
    PricingContext,
    Product,
    Region,
    Variant,
)
from product_feed.core.feed.service import ProductFeedService


class FakeCommerce:
    """In-memory regions, catalog and availability with call recording."""

    def __init__(
        self,
        regions: Optional[List[Region]] = None,
        products: Optional[List[Product]] = None,
        availability: Optional[Dict[str, Dict[str, int]]] = None
    ):
        self.regions = regions if regions is not None else []
        self.products = products if products is not None else []
        # {sales_channel_id: {variant_id: quantity}}
        self.availability = availability or {}
        self.page_calls: List[tuple] = []
        self.availability_calls: List[tuple] = []
        self.count_calls = 0

    async def list_regions(self) -> List[Region]:
        return list(self.regions)

    async def count_products(self) -> int:
        self.count_calls += 1
        return len(self.products)

    async def fetch_product_page(
        self,
        fields: Sequence[str],
        context: PricingContext,
        offset: int,
        take: int
    ) -> List[Product]:
        self.page_calls.append((context, offset, take))
        return self.products[offset:offset + take]

    async def get_availability(self, variant_ids: List[str], sales_channel_id: str):
        self.availability_calls.append((list(variant_ids), sales_channel_id))
        channel = self.availability.get(sales_channel_id, {})
        return {vid: {"quantity": channel[vid]} for vid in variant_ids if vid in channel}


def make_product(
    product_id: str,
    variants: List[Variant],
    sales_channel_ids: Optional[List[str]] = None,
    **kwargs
) -> Product:
    defaults = dict(
        title=f"Product {product_id}",
        description=f"Description of {product_id}",
        handle=f"handle-{product_id}",
        thumbnail=f"https://cdn.example.com/{product_id}/thumb.jpg",
        images=[],
        material=None,
        type_label="Rings",
    )
    defaults.update(kwargs)
    return Product(
        id=product_id,
        variants=variants,
        sales_channel_ids=sales_channel_ids if sales_channel_ids is not None else ["sc1"],
        **defaults
    )


def make_variant(variant_id: str, original=1000, calculated=900, options=None, sku=None) -> Variant:
    return Variant(
        id=variant_id,
        sku=sku or f"SKU-{variant_id}",
        options=options or [],
        original_amount=original,
        calculated_amount=calculated,
    )


@pytest.fixture
def feed_options() -> FeedOptions:
    return FeedOptions(
        title="Test Feed",
        link="https://shop.example.com",
        description="Test products",
        brand=None,
    )


@pytest.fixture
def context() -> PricingContext:
    return PricingContext(region_id="r1", currency_code="usd")


@pytest.fixture
def example_commerce() -> FakeCommerce:
    """One region, one product with one red variant, 3 in stock."""
    variant = make_variant(
        "v1",
        original=1000,
        calculated=900,
        options=[OptionValue(option_title="Color", value="Red")],
    )
    product = make_product("p1", [variant], sales_channel_ids=["sc1"])
    return FakeCommerce(
        regions=[Region(id="r1", currency_code="usd", countries=[Country(iso_2="us", iso_3="usa")])],
        products=[product],
        availability={"sc1": {"v1": 3}},
    )


@pytest.fixture
def make_service(feed_options):
    def _make(commerce: FakeCommerce, **kwargs) -> ProductFeedService:
        return ProductFeedService(
            regions=commerce,
            catalog=commerce,
            availability=commerce,
            options=kwargs.pop("options", feed_options),
            **kwargs
        )
    return _make
