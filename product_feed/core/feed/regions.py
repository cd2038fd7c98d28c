"""
Pricing context selection.
"""

import logging
from typing import List, Optional

from .errors import NoRegionsConfigured, RegionNotFound
from .models import PricingContext, Region

logger = logging.getLogger(__name__)


def _region_has_country(region: Region, country_code: str) -> bool:
    code = country_code.lower()
    for country in region.countries:
        for candidate in (country.iso_2, country.iso_3):
            if candidate and candidate.lower() == code:
                return True
    return False


def select_region(
    regions: List[Region],
    region_id: Optional[str] = None,
    country_code: Optional[str] = None,
    currency_code: Optional[str] = None
) -> Region:
    """
    Pick the region to price the feed in.

    Precedence: region id, then country code, then currency, then the first
    region. A requested value without a matching region is an error rather
    than a silent fallback.

    Raises:
        NoRegionsConfigured: If ``regions`` is empty.
        RegionNotFound: If a requested id/country/currency has no match.
    """
    if not regions:
        raise NoRegionsConfigured()

    if region_id:
        for region in regions:
            if region.id == region_id:
                return region
        raise RegionNotFound(f"No region found with id {region_id}")

    if country_code:
        for region in regions:
            if _region_has_country(region, country_code):
                return region
        raise RegionNotFound("No region found for country code")

    if currency_code:
        wanted = currency_code.lower()
        for region in regions:
            if region.currency_code.lower() == wanted:
                return region
        raise RegionNotFound("No region found with currency code")

    return regions[0]


def resolve_pricing_context(
    regions: List[Region],
    region_id: Optional[str] = None,
    country_code: Optional[str] = None,
    currency_code: Optional[str] = None
) -> PricingContext:
    region = select_region(regions, region_id, country_code, currency_code)
    logger.debug(f"Selected region {region.id} ({region.currency_code}) from {len(regions)} regions")
    return PricingContext(region_id=region.id, currency_code=region.currency_code)
