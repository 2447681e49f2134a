"""
JWT access token helpers.
"""

from datetime import timedelta
from typing import Any, Dict, Optional

import jwt

from jobmete.core.config import settings
from jobmete.utils.time import utc_now


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed access token.

    Args:
        data: Claims to embed (user_id, email)
        expires_delta: Lifetime override; defaults to ACCESS_TOKEN_EXPIRE_HOURS

    Returns:
        Encoded JWT string
    """
    to_encode = dict(data)
    expire = utc_now() + (expires_delta or timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS))
    to_encode["exp"] = expire
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode and verify a token. Returns None if it is invalid or expired."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.PyJWTError:
        return None
