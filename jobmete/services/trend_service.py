"""
Trend aggregation service.

Combines every company of a user with their reviewed events into one
AI-generated trend summary, which replaces the previous one.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from jobmete.core.config import settings
from jobmete.errors import FailedPreconditionError, InternalError, NotFoundError
from jobmete.models.trend import TrendSummary
from jobmete.prompts.trend_analysis import ReviewedEvent, TrendCompany, build_trend_analysis_prompt
from jobmete.repositories.company_repository import CompanyRepository
from jobmete.repositories.event_repository import EventRepository
from jobmete.repositories.trend_repository import TrendRepository
from jobmete.schemas.company import AnalysisMetadata, decode_analysis
from jobmete.schemas.event import EventReview
from jobmete.schemas.trend import (
    CompanyReviewStat,
    JobPositionStat,
    ReviewStats,
    TrendRead,
    TrendSummaryPayload,
)
from jobmete.services.ai_analysis_service import (
    AIRequestError,
    AIResponseParseError,
    GeminiAnalysisClient,
)
from jobmete.utils.time import utc_now

logger = logging.getLogger(__name__)


@dataclass
class TrendAnalysisResult:
    summary: TrendSummaryPayload
    analyzed_at: datetime
    company_count: int


def compute_review_stats(reviewed_events: Sequence[ReviewedEvent]) -> Optional[ReviewStats]:
    """
    Aggregate match ratings of reviewed events.

    Returns None when there are no reviews. Per-position stats only cover
    events with a job position; each entry lists the companies behind it
    with the mean of both ratings.
    """
    if not reviewed_events:
        return None

    positions: "OrderedDict[str, dict]" = OrderedDict()
    companies: "OrderedDict[str, dict]" = OrderedDict()
    company_distribution = [0] * 5
    job_distribution = [0] * 5

    for event in reviewed_events:
        company_distribution[event.company_match_rate - 1] += 1
        job_distribution[event.job_match_rate - 1] += 1

        if event.job_position:
            bucket = positions.setdefault(
                event.job_position,
                {"count": 0, "company_total": 0, "job_total": 0, "companies": []},
            )
            bucket["count"] += 1
            bucket["company_total"] += event.company_match_rate
            bucket["job_total"] += event.job_match_rate
            bucket["companies"].append(
                {
                    "companyName": event.company_name,
                    "eventType": event.event_type,
                    "matchRate": (event.company_match_rate + event.job_match_rate) / 2,
                }
            )

        bucket = companies.setdefault(
            event.company_name,
            {"count": 0, "company_total": 0, "job_total": 0},
        )
        bucket["count"] += 1
        bucket["company_total"] += event.company_match_rate
        bucket["job_total"] += event.job_match_rate

    total = len(reviewed_events)
    return ReviewStats(
        total_reviews=total,
        avg_company_match=sum(e.company_match_rate for e in reviewed_events) / total,
        avg_job_match=sum(e.job_match_rate for e in reviewed_events) / total,
        job_position_stats=[
            JobPositionStat(
                position=position,
                count=bucket["count"],
                avg_company_match=bucket["company_total"] / bucket["count"],
                avg_job_match=bucket["job_total"] / bucket["count"],
                companies=bucket["companies"],
            )
            for position, bucket in positions.items()
        ],
        company_stats=[
            CompanyReviewStat(
                company_name=name,
                review_count=bucket["count"],
                avg_company_match=bucket["company_total"] / bucket["count"],
                avg_job_match=bucket["job_total"] / bucket["count"],
            )
            for name, bucket in companies.items()
        ],
        company_match_distribution=company_distribution,
        job_match_distribution=job_distribution,
    )


class TrendService:
    """Service for trend analysis."""

    def __init__(self, db: AsyncSession, analysis_client: Optional[GeminiAnalysisClient] = None):
        self.db = db
        self.company_repository = CompanyRepository(db)
        self.event_repository = EventRepository(db)
        self.repository = TrendRepository(db)
        self.analysis_client = analysis_client

    async def _load_companies(self, user_id: UUID) -> List[tuple]:
        records = await self.company_repository.list(user_id)
        loaded = []
        for record in records:
            metadata = AnalysisMetadata.model_validate(record.analysis_metadata or {})
            try:
                analysis = decode_analysis(metadata.version, record.analysis)
            except ValueError as exc:
                logger.exception("Stored analysis of company %s cannot be decoded", record.id)
                raise InternalError(f"Stored analysis of company {record.id} is invalid") from exc
            loaded.append((record.id, TrendCompany(company_name=record.company_name, analysis=analysis)))
        return loaded

    async def _load_reviewed_events(self, user_id: UUID) -> List[ReviewedEvent]:
        reviewed = []
        for event in await self.event_repository.list_reviewed(user_id):
            review = EventReview.model_validate(event.review)
            reviewed.append(
                ReviewedEvent(
                    company_name=event.company_name,
                    event_type=event.event_type,
                    company_match_rate=review.company_match_rate,
                    job_match_rate=review.job_match_rate,
                    feedback=review.feedback,
                    job_position=event.job_position,
                )
            )
        return reviewed

    async def analyze_trends(self, user_id: UUID) -> TrendAnalysisResult:
        """
        Generate and store a new trend summary.

        Raises:
            FailedPreconditionError: If the user has fewer than
                TREND_MIN_COMPANIES companies (message includes the count)
            InternalError: If the model call fails or returns a malformed summary
        """
        company_count = await self.company_repository.count(user_id)
        if company_count < settings.TREND_MIN_COMPANIES:
            raise FailedPreconditionError(
                f"Trend analysis requires at least {settings.TREND_MIN_COMPANIES} "
                f"registered companies (current: {company_count})"
            )
        if self.analysis_client is None:
            raise InternalError("Analysis client is not configured")

        companies = await self._load_companies(user_id)
        reviewed_events = await self._load_reviewed_events(user_id)
        review_stats = compute_review_stats(reviewed_events)
        logger.info(
            "Analyzing trends for user %s: %d companies, %d reviews",
            user_id,
            len(companies),
            len(reviewed_events),
        )

        prompt = build_trend_analysis_prompt(
            [company for _, company in companies],
            reviewed_events,
            review_stats,
        )
        try:
            result = await self.analysis_client.analyze(prompt, repair_json=True)
            summary = TrendSummaryPayload.model_validate(result.payload)
        except (AIRequestError, AIResponseParseError, ValidationError) as exc:
            logger.exception("Trend analysis failed for user %s", user_id)
            raise InternalError(f"Trend analysis failed: {exc}") from exc

        if not reviewed_events:
            summary.match_insights = None

        analyzed_at = utc_now()
        await self.repository.replace(
            user_id=user_id,
            summary=summary.model_dump(mode="json", by_alias=True),
            source_companies=[
                {"company_id": str(company_id), "company_name": company.company_name}
                for company_id, company in companies
            ],
            review_stats=review_stats.model_dump(mode="json") if review_stats else None,
            analyzed_at=analyzed_at,
            company_count=len(companies),
            model_used=result.metadata.model_used,
        )
        await self.db.commit()

        logger.info("Stored trend summary for user %s (%d companies)", user_id, len(companies))
        return TrendAnalysisResult(
            summary=summary,
            analyzed_at=analyzed_at,
            company_count=len(companies),
        )

    async def get_latest(self, user_id: UUID) -> TrendSummary:
        trend = await self.repository.get_latest(user_id)
        if not trend:
            raise NotFoundError("No trend analysis has been run yet")
        return trend

    @staticmethod
    def to_read(trend: TrendSummary) -> TrendRead:
        return TrendRead.model_validate(trend)
