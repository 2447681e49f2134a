"""
Company model.

One row per real-world company a user is tracking, deduplicated on the
normalized company name.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from jobmete.models.base_model import JSONType, UserScopedModel


class Company(UserScopedModel):
    """
    Company table - a company plus its AI analysis and event statistics.

    analysis holds the model output; its shape is selected by
    analysis_metadata["version"] (see jobmete.schemas.company.decode_analysis).
    """

    __tablename__ = "company"

    # Name as entered by the user (trimmed)
    company_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    # Dedup key, see jobmete.utils.normalizer
    normalized_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    analysis: Mapped[dict] = mapped_column(
        JSONType,
        nullable=False,
        default=dict,
    )

    # status, model_used, tokens_used, search_sources, analyzed_at, version,
    # needs_update, last_update_check, prompt, raw_response
    analysis_metadata: Mapped[dict] = mapped_column(
        JSONType,
        nullable=False,
        default=dict,
    )

    user_notes: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )

    # Stats
    event_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    first_registered_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    last_event_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    __table_args__ = (
        Index("uq_company_user_normalized_name", "user_id", "normalized_name", unique=True),
    )
