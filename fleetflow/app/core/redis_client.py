"""
Redis client initialization and connection management.

Redis holds the JWT blacklist used by logout.
"""

import redis.asyncio as redis
from fleetflow.app.core.config import settings


# Create async Redis client (connects lazily on first command)
redis_client = redis.from_url(
    settings.redis_url,
    decode_responses=settings.redis_decode_responses,
)


async def get_redis():
    """
    Get Redis client instance.

    Resolved at call time so tests can swap the module-level client.
    """
    return redis_client

