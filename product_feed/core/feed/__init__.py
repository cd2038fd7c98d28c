"""
Feed generation core module.
"""

from .models import (
    FeedHooks,
    FeedItem,
    FeedOptions,
    ItemContext,
    OptionValue,
    PricingContext,
    Product,
    Region,
    Variant,
)
from .errors import (
    AvailabilityLookupFailed,
    FeedError,
    NoRegionsConfigured,
    RegionNotFound,
    TransformHookFailed,
)
from .options import normalize_options, sanitize_name
from .service import ProductFeedService, assemble_feed
from .xml_writer import write_feed_xml

__all__ = [
    'FeedHooks',
    'FeedItem',
    'FeedOptions',
    'ItemContext',
    'OptionValue',
    'PricingContext',
    'Product',
    'Region',
    'Variant',
    'FeedError',
    'NoRegionsConfigured',
    'RegionNotFound',
    'AvailabilityLookupFailed',
    'TransformHookFailed',
    'normalize_options',
    'sanitize_name',
    'ProductFeedService',
    'assemble_feed',
    'write_feed_xml',
]
