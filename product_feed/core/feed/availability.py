"""
Per-sales-channel availability lookups for one catalog batch.
"""

import asyncio
import logging
from typing import Dict, List

from .collaborators import AvailabilityLookup
from .errors import AvailabilityLookupFailed
from .models import Product

logger = logging.getLogger(__name__)


def group_variants_by_sales_channel(products: List[Product]) -> Dict[str, List[str]]:
    """
    Partition the batch's variant ids by each product's first sales channel.

    Products without a sales channel contribute nothing. Groups keep the order
    in which their channel first appears in the batch.
    """
    groups: Dict[str, List[str]] = {}
    for product in products:
        if not product.sales_channel_ids:
            continue
        channel_id = product.sales_channel_ids[0]
        groups.setdefault(channel_id, []).extend(v.id for v in product.variants)
    return groups


async def _lookup_group(lookup: AvailabilityLookup, channel_id: str, variant_ids: List[str]):
    try:
        return await lookup.get_availability(variant_ids, channel_id)
    except Exception as e:
        raise AvailabilityLookupFailed(channel_id, e) from e


async def resolve_availability(products: List[Product], lookup: AvailabilityLookup) -> Dict[str, int]:
    """
    Build {variant_id: quantity} for a batch with one query per sales channel.

    Queries run concurrently and all must succeed. Results merge in group
    order, so a variant resolved by two groups keeps the later group's value.
    With first-channel grouping a variant belongs to exactly one group.

    Raises:
        AvailabilityLookupFailed: If any group query fails.
    """
    groups = [
        (channel_id, variant_ids)
        for channel_id, variant_ids in group_variants_by_sales_channel(products).items()
        if variant_ids
    ]
    if not groups:
        return {}

    logger.debug(f"Resolving availability for {len(groups)} sales channel group(s)")
    results = await asyncio.gather(
        *(_lookup_group(lookup, channel_id, variant_ids) for channel_id, variant_ids in groups)
    )

    availability: Dict[str, int] = {}
    for result in results:
        for variant_id, entry in (result or {}).items():
            availability[variant_id] = int((entry or {}).get('quantity') or 0)
    return availability
