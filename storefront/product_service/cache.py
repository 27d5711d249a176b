"""
Redis-backed cache for the full product listing
"""
import logging
from typing import Optional

import redis

from storefront.product_service.config import settings

logger = logging.getLogger(__name__)


def create_redis_client(url: str) -> Optional[redis.Redis]:
    """Build a client for the URL; None disables caching"""
    if not url:
        return None
    return redis.Redis.from_url(
        url,
        socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
        socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT,
        decode_responses=True,
    )


# Connection is lazy: nothing is opened until the first command
redis_client = create_redis_client(settings.REDIS_URL)


class ProductListingCache:
    """
    Single-key read-through cache

    Every operation is fail-open: a missing or broken Redis only costs a
    trip to the database.

    A generation counter stored next to the listing is bumped on every
    invalidation. A reader records the generation before querying and its
    write is dropped if the generation moved meanwhile, so a listing read
    before a product change is never cached after it.
    """

    def __init__(
        self,
        client: Optional[redis.Redis],
        key: str = settings.PRODUCTS_CACHE_KEY,
        ttl_seconds: int = settings.PRODUCTS_CACHE_TTL
    ):
        self.client = client
        self.key = key
        self.ttl_seconds = ttl_seconds
        self.generation_key = f"{key}:generation"

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def get(self) -> Optional[str]:
        """Cached serialized listing, or None on miss or error"""
        if not self.enabled:
            return None
        try:
            return self.client.get(self.key)
        except redis.RedisError as e:
            logger.warning("Cache read failed for %s: %s", self.key, e)
            return None

    def generation(self) -> Optional[str]:
        """Current invalidation generation, or None when unavailable"""
        if not self.enabled:
            return None
        try:
            return self.client.get(self.generation_key) or "0"
        except redis.RedisError as e:
            logger.warning("Cache read failed for %s: %s", self.generation_key, e)
            return None

    def set(self, payload: str, generation: Optional[str]) -> None:
        """Store the listing unless it was invalidated since generation was read"""
        if generation is None:
            return
        try:
            if self.generation() != generation:
                logger.info("Listing changed while it was read, not caching %s", self.key)
                return
            self.client.set(self.key, payload, ex=self.ttl_seconds)
        except redis.RedisError as e:
            logger.warning("Cache write failed for %s: %s", self.key, e)

    def invalidate(self) -> None:
        if not self.enabled:
            return
        try:
            self.client.incr(self.generation_key)
            self.client.delete(self.key)
        except redis.RedisError as e:
            logger.warning("Cache invalidation failed for %s: %s", self.key, e)

    def ping(self) -> str:
        """Status string for health checks"""
        if not self.enabled:
            return "disabled"
        try:
            self.client.ping()
            return "healthy"
        except redis.RedisError as e:
            return f"unhealthy: {e.__class__.__name__}"


def get_product_cache() -> ProductListingCache:
    """Dependency to get the listing cache"""
    return ProductListingCache(redis_client)
