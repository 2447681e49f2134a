"""
Authentication router for account registration and login.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from jobmete.core.dependencies import get_current_user, get_db
from jobmete.models.user import User
from jobmete.schemas.user import LoginRequest, LoginResponse, UserCreate, UserRead
from jobmete.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Create an account.

    Passwords must be 8-128 characters and contain letters and digits.
    """
    auth_service = AuthService(db)
    return await auth_service.register(user_data)


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """Authenticate and return a bearer access token."""
    auth_service = AuthService(db)
    return await auth_service.login(credentials)


@router.get("/me", response_model=UserRead)
async def get_current_user_info(
    current_user: User = Depends(get_current_user),
):
    """Get information about the currently authenticated user."""
    return current_user
