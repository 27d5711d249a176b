"""
Health check endpoint

The listing cache is reported alongside the database; the service stays
healthy without it.
"""
from fastapi import Depends

from storefront.health import create_health_router
from storefront.product_service.cache import ProductListingCache, get_product_cache
from storefront.product_service.config import settings


def cache_status(cache: ProductListingCache = Depends(get_product_cache)) -> dict:
    return {"cache": cache.ping()}


router = create_health_router(settings.SERVICE_NAME, cache_status)
