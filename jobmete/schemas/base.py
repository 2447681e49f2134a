"""
Base Pydantic schemas with common fields.

These are templates that other schemas inherit from. The HTTP API speaks
camelCase; Python code uses snake_case field names.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base schema for anything that crosses the HTTP boundary.

    Accepts both camelCase and snake_case keys on input; FastAPI
    serializes responses by alias (camelCase).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserScopedRead(CamelModel):
    """
    Base schema for reading user-scoped data.

    Includes all the auto-generated fields like id, timestamps, etc.
    """

    id: UUID
    user_id: UUID
    created_at: datetime
    updated_at: datetime


class SuccessResponse(CamelModel):
    """Plain acknowledgement for operations with nothing else to return."""

    success: bool = True
