"""
Authentication dependencies for FastAPI.

This module provides dependencies for protecting routes with JWT authentication.
"""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from fleetflow.app.core.exceptions import AuthenticationError
from fleetflow.app.core.jwt import decode_access_token
from fleetflow.app.core.token_revocation import is_token_revoked
from fleetflow.app.db.session import get_db
from fleetflow.app.models.user import User

logger = logging.getLogger(__name__)

# HTTP Bearer security scheme; missing headers are answered with 401 below
security = HTTPBearer(auto_error=False)


async def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """Extract the raw bearer token or fail with 401."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authorized to access this route")
    return credentials.credentials


async def get_current_user(
    token: str = Depends(get_bearer_token),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    FastAPI dependency for JWT authentication (the `protect` step).

    Checks:
    1. Validates JWT token signature and expiry
    2. Checks if token has been revoked by logout
    3. Verifies user still exists in database

    Returns:
        The authenticated User row

    Raises:
        AuthenticationError (401) if any check fails
    """
    # 1. Decode and validate JWT
    payload = decode_access_token(token)
    if payload is None:
        raise AuthenticationError("Not authorized, token failed")

    user_id = payload.get("user_id")
    if not user_id:
        raise AuthenticationError("Invalid token payload")

    # 2. Check if this specific token has been revoked
    if await is_token_revoked(token):
        raise AuthenticationError("Token has been revoked")

    # 3. Real-time database check
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user:
        logger.info("Token for missing user %s rejected", user_id)
        raise AuthenticationError("User not found")

    return user
