"""
Commerce backend REST API client with retry logic and rate limiting.
"""

import time
import random
import asyncio
import logging
from typing import Optional, Dict, List, Any, Sequence
import httpx
from urllib.parse import urljoin

from product_feed.core.security import sanitize_dict_for_logging
from product_feed.core.feed.models import (
    Country,
    OptionValue,
    PricingContext,
    Product,
    Region,
    Variant,
)

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Base exception for commerce backend API errors."""
    pass


def parse_region(data: Dict[str, Any]) -> Region:
    return Region(
        id=data.get("id", ""),
        currency_code=data.get("currency_code", ""),
        countries=[
            Country(iso_2=c.get("iso_2"), iso_3=c.get("iso_3"))
            for c in data.get("countries") or []
            if isinstance(c, dict)
        ],
    )


def parse_variant(data: Dict[str, Any]) -> Variant:
    price = data.get("calculated_price") or {}
    options = []
    for opt in data.get("options") or []:
        if not isinstance(opt, dict):
            continue
        options.append(OptionValue(
            option_title=(opt.get("option") or {}).get("title"),
            value=opt.get("value"),
        ))
    return Variant(
        id=data.get("id", ""),
        sku=data.get("sku"),
        options=options,
        original_amount=price.get("original_amount"),
        calculated_amount=price.get("calculated_amount"),
    )


def parse_product(data: Dict[str, Any]) -> Product:
    return Product(
        id=data.get("id", ""),
        title=data.get("title") or "",
        description=data.get("description"),
        handle=data.get("handle") or "",
        thumbnail=data.get("thumbnail"),
        images=[img.get("url") for img in data.get("images") or [] if isinstance(img, dict)],
        material=data.get("material"),
        type_label=(data.get("type") or {}).get("value"),
        sales_channel_ids=[sc.get("id") for sc in data.get("sales_channels") or [] if isinstance(sc, dict) and sc.get("id")],
        variants=[parse_variant(v) for v in data.get("variants") or [] if isinstance(v, dict)],
    )


class CatalogClient:
    """
    Async client for the commerce backend admin API.

    Serves as region resolver, catalog query and availability lookup for
    the feed service.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        rate_limit_rps: float = 10.0,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize catalog client.

        Args:
            base_url: Backend base URL (e.g., https://shop.example.com)
            api_key: Secret admin API key (sent as basic auth username)
            rate_limit_rps: Rate limit (requests per second)
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.rate_limit_rps = rate_limit_rps
        self.timeout = timeout

        # Rate limiting state
        self._last_request_time = 0.0
        self._rate_lock = asyncio.Lock()
        self._min_interval = 1.0 / rate_limit_rps if rate_limit_rps > 0 else 0

        self.client = httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            transport=transport
        )

    def _get_auth(self) -> Optional[httpx.Auth]:
        if not self.api_key:
            return None
        return httpx.BasicAuth(self.api_key, "")

    async def _wait_for_rate_limit(self):
        """Wait if needed to respect rate limit."""
        # Concurrent callers queue here so each one is spaced from the last
        async with self._rate_lock:
            now = time.time()
            elapsed = now - self._last_request_time
            if elapsed < self._min_interval:
                await asyncio.sleep(self._min_interval - elapsed)
            self._last_request_time = time.time()

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict] = None,
        max_retries: int = 3,
        initial_delay: float = 1.0,
        backoff_factor: float = 2.0
    ) -> httpx.Response:
        """
        Make HTTP request with retry logic.

        Raises:
            CatalogError: If request fails after retries
        """
        url = urljoin(self.base_url + '/', endpoint.lstrip('/'))
        auth = self._get_auth()

        last_error = None

        for attempt in range(max_retries + 1):
            await self._wait_for_rate_limit()

            try:
                response = await self.client.request(
                    method=method,
                    url=url,
                    params=params,
                    auth=auth
                )

                if response.status_code in (200, 201, 204):
                    return response

                # Non-retryable errors
                if response.status_code in (400, 401, 403, 404, 422):
                    raise CatalogError(
                        f"HTTP {response.status_code}: {response.text[:200]}"
                    )

                # Retryable errors (429, 500, 502, 503, 504)
                if response.status_code in (429, 500, 502, 503, 504):
                    last_error = f"HTTP {response.status_code}"
                    if attempt < max_retries:
                        delay = min(initial_delay * (backoff_factor ** attempt), 30.0)
                        delay += random.uniform(0, 0.4)  # Jitter
                        logger.warning(
                            f"Retrying {method} {endpoint} after {last_error} "
                            f"(attempt {attempt + 1}/{max_retries}) | params={sanitize_dict_for_logging(params or {})}"
                        )
                        await asyncio.sleep(delay)
                        continue
                    raise CatalogError(
                        f"HTTP {response.status_code} after {max_retries} retries: {response.text[:200]}"
                    )

                response.raise_for_status()
                return response

            except httpx.TimeoutException as e:
                last_error = f"Timeout: {str(e)}"
                if attempt < max_retries:
                    logger.warning(f"Timeout on {method} {endpoint} (attempt {attempt + 1}/{max_retries})")
                    await asyncio.sleep(min(initial_delay * (backoff_factor ** attempt), 30.0))
                    continue
                raise CatalogError(f"Timeout after {max_retries} retries: {e}")

            except httpx.RequestError as e:
                last_error = f"Request error: {str(e)}"
                if attempt < max_retries:
                    logger.warning(f"Request error on {method} {endpoint}: {e} (attempt {attempt + 1}/{max_retries})")
                    await asyncio.sleep(min(initial_delay * (backoff_factor ** attempt), 30.0))
                    continue
                raise CatalogError(f"Request error after {max_retries} retries: {e}")

        raise CatalogError(f"Request failed after {max_retries} retries: {last_error}")

    async def list_regions(self) -> List[Region]:
        response = await self._request(
            "GET", "/admin/regions",
            params={"fields": "id,currency_code,*countries", "limit": 1000}
        )
        data = response.json()
        return [parse_region(r) for r in data.get("regions") or [] if isinstance(r, dict)]

    async def count_products(self) -> int:
        response = await self._request("GET", "/admin/products", params={"limit": 0, "fields": "id"})
        return int(response.json().get("count") or 0)

    async def fetch_product_page(
        self,
        fields: Sequence[str],
        context: PricingContext,
        offset: int,
        take: int
    ) -> List[Product]:
        """
        Fetch one page of products priced in ``context``.

        Args:
            fields: Product fields to select
            context: Region/currency for calculated prices
            offset: Products to skip
            take: Page size

        Returns:
            List of Product
        """
        params = {
            "fields": ",".join(fields),
            "region_id": context.region_id,
            "currency_code": context.currency_code,
            "offset": offset,
            "limit": take,
        }
        response = await self._request("GET", "/admin/products", params=params)
        products = response.json().get("products") or []
        return [parse_product(p) for p in products if isinstance(p, dict)]

    async def get_availability(
        self,
        variant_ids: List[str],
        sales_channel_id: str
    ) -> Dict[str, Dict[str, int]]:
        """
        Get variant availability in one sales channel.

        Returns:
            {variant_id: {"quantity": n}}
        """
        response = await self._request(
            "GET",
            f"/admin/sales-channels/{sales_channel_id}/variant-availability",
            params={"variant_ids": ",".join(variant_ids)}
        )
        raw = response.json().get("availability") or {}
        result: Dict[str, Dict[str, int]] = {}
        for variant_id, entry in raw.items():
            if not isinstance(entry, dict):
                continue
            quantity = entry.get("quantity", entry.get("availability"))
            result[variant_id] = {"quantity": int(quantity or 0)}
        return result

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()
