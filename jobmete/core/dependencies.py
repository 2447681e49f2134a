"""
FastAPI dependencies shared by the routers.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from jobmete.db.session import get_db
from jobmete.errors import UnauthenticatedError
from jobmete.models.user import User
from jobmete.services.ai_analysis_service import GeminiAnalysisClient, get_analysis_client
from jobmete.services.auth_service import AuthService

__all__ = ["get_db", "get_current_user", "get_analysis_client", "GeminiAnalysisClient"]

# auto_error=False so a missing header is reported in the API error format
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Resolve the bearer token to the calling user.

    Raises:
        UnauthenticatedError: If no token is sent or it does not resolve to an
            active user
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("Authentication required")

    return await AuthService(db).get_user_from_token(credentials.credentials)
