"""
Redis client for the storefront

Caches the public read paths (rendered homepage, product page layout).
Every helper degrades to a no-op when REDIS_URL is not configured.
"""
import json
import logging
from typing import Optional
import redis.asyncio as redis
from storefront.core.config import settings

logger = logging.getLogger(__name__)

# Global Redis client (initialized lazily)
_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get Redis client, initializing if needed.

    Returns None if REDIS_URL not configured (graceful degradation).
    """
    global _redis_client

    if not settings.REDIS_URL:
        return None

    if _redis_client is None:
        try:
            _redis_client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True
            )
            await _redis_client.ping()
            logger.info("Redis connection established")
        except Exception as e:
            logger.warning(f"Redis connection failed: {e}. Serving uncached.")
            _redis_client = None

    return _redis_client


async def close_redis():
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.close()
        _redis_client = None


# ----- Storefront Cache -----

HOMEPAGE_RENDER_KEY = "storefront:homepage:render"
PRODUCT_LAYOUT_KEY = "storefront:product_page_layout"


async def get_cached(key: str) -> Optional[object]:
    """Get a cached JSON document."""
    client = await get_redis()
    if not client:
        return None
    try:
        data = await client.get(key)
        if data:
            return json.loads(data)
    except Exception as e:
        logger.debug(f"Redis cache miss for {key}: {e}")
    return None


async def set_cached(key: str, data: object, ttl_seconds: Optional[int] = None) -> bool:
    """Cache a JSON-serializable document."""
    client = await get_redis()
    if not client:
        return False
    try:
        ttl = ttl_seconds or settings.STOREFRONT_CACHE_TTL_SECONDS
        await client.setex(key, ttl, json.dumps(data))
        return True
    except Exception as e:
        logger.debug(f"Redis cache set failed for {key}: {e}")
        return False


async def invalidate_homepage_cache() -> bool:
    """Drop the rendered homepage after any section write."""
    return await _delete(HOMEPAGE_RENDER_KEY)


async def invalidate_product_layout_cache() -> bool:
    """Drop the public product page layout after a layout write."""
    return await _delete(PRODUCT_LAYOUT_KEY)


async def _delete(key: str) -> bool:
    client = await get_redis()
    if not client:
        return False
    try:
        await client.delete(key)
        return True
    except Exception as e:
        logger.debug(f"Redis cache delete failed for {key}: {e}")
        return False
