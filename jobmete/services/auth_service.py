"""
Authentication service for account registration and login.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jobmete.core.jwt import create_access_token, decode_access_token
from jobmete.core.security import verify_password
from jobmete.errors import InvalidArgumentError, UnauthenticatedError
from jobmete.models.user import User
from jobmete.repositories.user_repository import UserRepository
from jobmete.schemas.user import LoginRequest, LoginResponse, UserCreate, UserRead
from jobmete.utils.validators import InputLimits, validate_password, validate_short_text

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repository = UserRepository(db)

    async def register(self, data: UserCreate) -> User:
        """
        Create an account.

        Raises:
            InvalidArgumentError: If the password is too weak, the display
                name is missing or the email is already registered
        """
        validate_password(data.password)
        display_name = validate_short_text(data.display_name, "displayName", InputLimits.DISPLAY_NAME)
        if not display_name:
            raise InvalidArgumentError("displayName is required")

        if await self.user_repository.get_by_email(data.email):
            raise InvalidArgumentError("Email is already registered")

        try:
            user = await self.user_repository.create(
                email=data.email,
                display_name=display_name,
                password=data.password,
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise InvalidArgumentError("Email is already registered")

        logger.info("Registered user %s", user.id)
        return user

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """Return the user if the credentials are valid and the account is active."""
        user = await self.user_repository.get_by_email(email)
        if not user:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        if not user.is_active:
            return None
        return user

    async def login(self, credentials: LoginRequest) -> LoginResponse:
        """
        Authenticate and issue an access token.

        Raises:
            UnauthenticatedError: If the credentials are invalid
        """
        user = await self.authenticate_user(credentials.email, credentials.password)
        if not user:
            logger.info("Failed login for %s", credentials.email)
            raise UnauthenticatedError("Incorrect email or password")

        user = await self.user_repository.touch_last_login(user)
        await self.db.commit()

        access_token = create_access_token(
            data={
                "user_id": str(user.id),
                "email": user.email,
            }
        )
        return LoginResponse(
            access_token=access_token,
            token_type="bearer",
            user=UserRead.model_validate(user),
        )

    async def get_user_from_token(self, token: str) -> User:
        """
        Resolve a bearer token to an active user.

        Raises:
            UnauthenticatedError: If the token is invalid, expired or names
                an unknown or disabled user
        """
        payload = decode_access_token(token)
        if not payload or not payload.get("user_id"):
            raise UnauthenticatedError("Invalid or expired token")

        try:
            user_id = UUID(str(payload["user_id"]))
        except ValueError:
            raise UnauthenticatedError("Invalid or expired token")

        user = await self.user_repository.get_by_id(user_id)
        if not user or not user.is_active:
            raise UnauthenticatedError("User not found or inactive")
        return user
