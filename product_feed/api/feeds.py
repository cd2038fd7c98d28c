"""
Feed API endpoints.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse, Response

from product_feed.deps import get_feed_hooks, get_feed_service
from product_feed.core.catalog_client import CatalogError
from product_feed.core.feed.errors import (
    AvailabilityLookupFailed,
    FeedError,
    NoRegionsConfigured,
    RegionNotFound,
)
from product_feed.core.feed.models import FeedHooks
from product_feed.core.feed.service import ProductFeedService
from product_feed.schemas.common import ErrorResponse

router = APIRouter()

logger = logging.getLogger(__name__)

XML_MEDIA_TYPE = "application/xml"


# Errors keep the plain {"message": ...} body the feed consumers already parse
def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(message=message).model_dump())


def _feed_error_response(error: Exception) -> JSONResponse:
    """Translate a failed build into an HTTP error."""
    if isinstance(error, (NoRegionsConfigured, RegionNotFound)):
        return _error_response(status.HTTP_404_NOT_FOUND, str(error))

    if isinstance(error, (AvailabilityLookupFailed, CatalogError)):
        logger.error(f"Feed build failed on commerce backend: {error}")
        return _error_response(status.HTTP_502_BAD_GATEWAY, str(error))

    logger.error(f"Feed build failed: {error}", exc_info=error)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(error))


@router.get("/v2/products")
async def get_json_feed(
    country_code: Optional[str] = Query(None, min_length=2, max_length=3),
    currency: Optional[str] = Query(None, min_length=3, max_length=3),
    page: Optional[int] = Query(None, ge=1),
    page_size: Optional[int] = Query(None, ge=1, le=1000),
    service: ProductFeedService = Depends(get_feed_service),
    hooks: FeedHooks = Depends(get_feed_hooks)
):
    """
    JSON product feed, one item per priced variant.

    Pagination is by products: ``page``/``page_size`` select a page of
    products, so the number of items varies with variants per product.
    """
    try:
        items = await service.build_mapped_feed_data(
            country_code=country_code,
            currency_code=currency,
            mode="json",
            hooks=hooks,
            page=page,
            page_size=page_size
        )
    except (FeedError, CatalogError) as e:
        return _feed_error_response(e)

    return JSONResponse(content=items)


@router.get("/products/all")
async def get_full_json_feed(
    currency: Optional[str] = Query(None, min_length=3, max_length=3),
    service: ProductFeedService = Depends(get_feed_service),
    hooks: FeedHooks = Depends(get_feed_hooks)
):
    """Whole JSON feed in one response, priced by currency or the first region."""
    try:
        items = await service.build_mapped_feed_data(
            currency_code=currency,
            mode="json",
            hooks=hooks
        )
    except (FeedError, CatalogError) as e:
        return _feed_error_response(e)

    return JSONResponse(content=items)


@router.get("/v1/products-xml")
async def get_xml_feed(
    country_code: Optional[str] = Query(None, min_length=2, max_length=3),
    currency: Optional[str] = Query(None, min_length=3, max_length=3),
    google_merchant: bool = Query(False),
    service: ProductFeedService = Depends(get_feed_service),
    hooks: FeedHooks = Depends(get_feed_hooks)
):
    """
    RSS 2.0 product feed.

    Item tags carry the ``g:`` prefix only when ``google_merchant`` is set.
    """
    try:
        xml = await service.build_feed_xml(
            country_code=country_code,
            currency_code=currency,
            google_merchant=google_merchant,
            hooks=hooks
        )
    except (FeedError, CatalogError) as e:
        return _feed_error_response(e)

    return Response(content=xml, media_type=XML_MEDIA_TYPE)


@router.get("/products-xml")
async def get_merchant_xml_feed(
    currency: Optional[str] = Query(None, min_length=3, max_length=3),
    service: ProductFeedService = Depends(get_feed_service),
    hooks: FeedHooks = Depends(get_feed_hooks)
):
    """Google Merchant feed; every item tag is ``g:``-prefixed."""
    try:
        xml = await service.build_feed_xml(
            currency_code=currency,
            google_merchant=True,
            hooks=hooks
        )
    except (FeedError, CatalogError) as e:
        return _feed_error_response(e)

    return Response(content=xml, media_type=XML_MEDIA_TYPE)
