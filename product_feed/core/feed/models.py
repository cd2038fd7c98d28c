"""
Feed data models.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Literal, Optional, Union


FeedMode = Literal["json", "xml"]

# An output record: ordered field name -> scalar value
FeedItem = Dict[str, Any]


@dataclass(frozen=True)
class FeedOptions:
    """Static metadata describing the feed channel."""
    title: str = 'Product Feed'
    link: str = 'https://example.com'
    description: str = 'A feed of products from our store'
    brand: Optional[str] = None


@dataclass(frozen=True)
class PricingContext:
    """Region and currency used to price every variant of one feed build."""
    region_id: str
    currency_code: str


@dataclass
class Country:
    iso_2: Optional[str] = None
    iso_3: Optional[str] = None


@dataclass
class Region:
    id: str
    currency_code: str
    countries: List[Country] = field(default_factory=list)


@dataclass
class OptionValue:
    option_title: Optional[str]
    value: Optional[str]


@dataclass
class Variant:
    id: str
    sku: Optional[str] = None
    options: List[OptionValue] = field(default_factory=list)
    original_amount: Optional[float] = None  # None = no price in the requested context
    calculated_amount: Optional[float] = None


@dataclass
class Product:
    id: str
    title: str = ''
    description: Optional[str] = None
    handle: str = ''
    thumbnail: Optional[str] = None
    images: List[str] = field(default_factory=list)
    material: Optional[str] = None
    type_label: Optional[str] = None
    sales_channel_ids: List[str] = field(default_factory=list)
    variants: List[Variant] = field(default_factory=list)


@dataclass(frozen=True)
class BatchDescriptor:
    """One catalog fetch: products [offset, offset + take)."""
    index: int
    offset: int
    take: int


@dataclass
class ItemContext:
    """Context handed to an item transform hook."""
    product: Product
    variant: Variant
    availability: int
    region_id: str
    currency_code: str


ItemTransform = Callable[[FeedItem, ItemContext], Union[FeedItem, Awaitable[FeedItem]]]


@dataclass
class FeedHooks:
    """
    Post-mapping pipeline stage.

    Applied in a fixed order: transform, include filter, exclude filter,
    then empty-value stripping.
    """
    item_transform: Optional[ItemTransform] = None
    include_fields: Optional[List[str]] = None
    exclude_fields: Optional[List[str]] = None
