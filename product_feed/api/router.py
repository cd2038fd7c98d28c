"""
Main API router.
"""

from fastapi import APIRouter
from product_feed.api import feeds

router = APIRouter()

router.include_router(feeds.router, prefix="/feed", tags=["feed"])
