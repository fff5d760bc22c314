"""
JWT token utilities for authentication.

This module provides functions for encoding and decoding JWT tokens.
"""

from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from fleetflow.app.core.config import settings


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Data payload to encode in the token (should include: sub, user_id, role)
        expires_delta: Optional custom expiration time, defaults to JWT_EXPIRE

    Returns:
        Encoded JWT token string

    Example payload:
        {
            "sub": "dispatch@fleetflow.io",
            "user_id": 12,
            "role": "dispatcher",
            "exp": 1234567890
        }
    """
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or settings.token_lifetime)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode and validate a JWT access token.

    Returns:
        Decoded token payload if valid (signature and expiry), None otherwise
    """
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.algorithm])
    except JWTError:
        return None
