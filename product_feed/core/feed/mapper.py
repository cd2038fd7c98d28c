"""
Map catalog variants to flat feed items.
"""

import asyncio
import inspect
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import quote

from .errors import TransformHookFailed
from .models import (
    FeedHooks,
    FeedItem,
    FeedMode,
    FeedOptions,
    ItemContext,
    PricingContext,
    Product,
    Variant,
)
from .options import MERCHANT_PREFIX, normalize_options


# Only the first few product images are considered for additional images
IMAGE_SCAN_LIMIT = 3
MAX_ADDITIONAL_IMAGES = 2

# Characters encodeURIComponent leaves untouched
_URI_COMPONENT_SAFE = "-_.!~*'()"

# Field names that differ between the JSON and the Merchant shape
_JSON_RENAMES = {'item_group_id': 'itemgroup_id'}


def format_amount(amount: Any) -> str:
    """Render an amount the way it appears in a price string (1000.0 -> "1000")."""
    if isinstance(amount, float) and amount.is_integer():
        return str(int(amount))
    return str(amount)


def format_price(amount: Any, currency_code: str) -> Optional[str]:
    if amount is None:
        return None
    return f"{format_amount(amount)} {currency_code.upper()}"


def build_item_link(base_link: str, handle: str, options: Dict[str, str]) -> str:
    """Build ``<base>/<handle>?<options>`` with percent-encoded option pairs."""
    query = '&'.join(
        f"{quote(key, safe=_URI_COMPONENT_SAFE)}={quote(value, safe=_URI_COMPONENT_SAFE)}"
        for key, value in options.items()
    )
    return f"{base_link}/{handle}?{query}"


def select_additional_images(product: Product) -> List[str]:
    """Pick up to two gallery images that are not the thumbnail, without duplicates."""
    selected: List[str] = []
    for url in product.images[:IMAGE_SCAN_LIMIT]:
        if not url or url == product.thumbnail or url in selected:
            continue
        selected.append(url)
    return selected[:MAX_ADDITIONAL_IMAGES]


def make_key_function(mode: FeedMode, namespace_prefix: bool) -> Callable[[str], str]:
    """Return the mode-aware transform from canonical field names to output keys."""
    if mode == "xml":
        if namespace_prefix:
            return lambda name: MERCHANT_PREFIX + name
        return lambda name: name
    return lambda name: _JSON_RENAMES.get(name, name)


def _core_fields(
    product: Product,
    variant: Variant,
    availability: int,
    context: PricingContext,
    options: FeedOptions,
    mode: FeedMode,
    link: str
) -> List[Tuple[str, Any]]:
    """Canonical (Merchant) field names in output order for one variant."""
    images = select_additional_images(product)
    price = format_price(variant.original_amount, context.currency_code)
    sale_price = format_price(variant.calculated_amount, context.currency_code)
    common_head = [
        ('id', variant.id),
        ('item_group_id', product.id),
        ('title', product.title),
        ('description', product.description),
        ('link', link),
        ('image_link', product.thumbnail),
        ('additional_image_1', images[0] if len(images) > 0 else None),
        ('additional_image_2', images[1] if len(images) > 1 else None),
    ]
    common_tail = [
        ('mpn', variant.sku),
        ('product_type', product.type_label),
        ('material', product.material or ''),
    ]

    if mode == "xml":
        return common_head + [
            ('brand', options.brand or product.type_label),
            ('condition', 'new'),
            ('availability', 'in stock' if availability > 0 else 'out of stock'),
            ('price', price),
            ('sale_price', sale_price),
        ] + common_tail

    return common_head + [
        ('brand', options.brand),
        ('price', price),
        ('sale_price', sale_price),
        ('availability', availability),
    ] + common_tail


def build_item(
    product: Product,
    variant: Variant,
    availability: int,
    context: PricingContext,
    options: FeedOptions,
    mode: FeedMode = "json",
    namespace_prefix: bool = False
) -> FeedItem:
    """Assemble the unfiltered feed item for one variant; options are merged last."""
    variant_options = normalize_options(variant.options, mode, namespace_prefix)
    link = build_item_link(options.link, product.handle, variant_options)
    key = make_key_function(mode, namespace_prefix)

    item: FeedItem = {
        key(name): value
        for name, value in _core_fields(product, variant, availability, context, options, mode, link)
    }
    item.update(variant_options)
    return item


def strip_empty(item: FeedItem) -> FeedItem:
    return {k: v for k, v in item.items() if v is not None and v != ''}


async def apply_hooks(item: FeedItem, hooks: Optional[FeedHooks], ctx: ItemContext) -> FeedItem:
    """
    Run the post-mapping stage: transform, include, exclude, strip empties.

    Raises:
        TransformHookFailed: If the transform hook raises.
    """
    if hooks is not None:
        if hooks.item_transform is not None:
            try:
                result = hooks.item_transform(item, ctx)
                if inspect.isawaitable(result):
                    result = await result
            except Exception as e:
                raise TransformHookFailed(ctx.variant.id, e) from e
            if not isinstance(result, dict):
                raise TransformHookFailed(
                    ctx.variant.id,
                    TypeError(f"transform returned {type(result).__name__}, expected dict")
                )
            item = result

        if hooks.include_fields:
            included = set(hooks.include_fields)
            item = {k: v for k, v in item.items() if k in included}

        if hooks.exclude_fields:
            excluded = set(hooks.exclude_fields)
            item = {k: v for k, v in item.items() if k not in excluded}

    return strip_empty(item)


async def map_variant(
    product: Product,
    variant: Variant,
    availability: Dict[str, int],
    context: PricingContext,
    options: FeedOptions,
    mode: FeedMode = "json",
    namespace_prefix: bool = False,
    hooks: Optional[FeedHooks] = None
) -> FeedItem:
    quantity = availability.get(variant.id) or 0
    item = build_item(product, variant, quantity, context, options, mode, namespace_prefix)
    ctx = ItemContext(
        product=product,
        variant=variant,
        availability=quantity,
        region_id=context.region_id,
        currency_code=context.currency_code,
    )
    return await apply_hooks(item, hooks, ctx)


def priced_variants(product: Product) -> List[Variant]:
    """Variants without an original amount have no price in the context and are skipped."""
    return [v for v in product.variants if v.original_amount is not None]


async def map_batch(
    products: List[Product],
    availability: Dict[str, int],
    context: PricingContext,
    options: FeedOptions,
    mode: FeedMode = "json",
    namespace_prefix: bool = False,
    hooks: Optional[FeedHooks] = None
) -> List[FeedItem]:
    """
    Map every priced variant of a batch, concurrently.

    Items come back in product-then-variant order.
    """
    return list(await asyncio.gather(*(
        map_variant(product, variant, availability, context, options, mode, namespace_prefix, hooks)
        for product in products
        for variant in priced_variants(product)
    )))
