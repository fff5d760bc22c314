"""
Token Revocation System using Redis.

Implements token blacklisting so a logged-out JWT stops working before it
expires.
"""

import logging

from fleetflow.app.core import redis_client as redis_module
from fleetflow.app.core.config import settings

logger = logging.getLogger(__name__)

# Redis key prefix for blacklisted tokens
TOKEN_BLACKLIST_PREFIX = "blacklist:token:"


async def revoke_token(token: str, user_id: int) -> bool:
    """
    Revoke a specific JWT token by adding it to the blacklist.

    Args:
        token: The JWT token string to revoke
        user_id: User ID who owns the token

    Returns:
        True if successfully revoked, False otherwise
    """
    client = await redis_module.get_redis()
    try:
        # Tokens expire on their own, the blacklist entry only needs to outlive them
        ttl_seconds = int(settings.token_lifetime.total_seconds())
        await client.set(f"{TOKEN_BLACKLIST_PREFIX}{token}", str(user_id), ex=ttl_seconds)
        return True
    except Exception as exc:
        logger.error("Error revoking token for user %s: %s", user_id, exc)
        return False


async def is_token_revoked(token: str) -> bool:
    """
    Check if a token has been revoked.

    Returns:
        True if token is revoked, False otherwise (including when Redis is down)
    """
    client = await redis_module.get_redis()
    try:
        exists = await client.exists(f"{TOKEN_BLACKLIST_PREFIX}{token}")
        return exists > 0
    except Exception as exc:
        # Fails open when Redis is unreachable
        logger.warning("Error checking token revocation: %s", exc)
        return False
