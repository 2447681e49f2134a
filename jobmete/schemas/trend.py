"""
Trend summary Pydantic schemas.

TrendSummaryPayload validates the model's aggregate analysis and brings it
into shape: ranked lists are sorted and capped, percentages are bounded.
"""

import math
from typing import Any, Dict, List, Optional
from uuid import UUID
from datetime import datetime

from pydantic import Field, field_validator, model_validator

from jobmete.schemas.base import CamelModel, UserScopedRead


MAX_RANKED_ITEMS = 10
MAX_INSIGHT_ITEMS = 3


class TopIndustry(CamelModel):
    name: str
    count: int = Field(0, ge=0)
    percentage: float = 0.0

    @field_validator("percentage")
    @classmethod
    def clamp_percentage(cls, value: float) -> float:
        return min(max(value, 0.0), 100.0)


class CommonKeyword(CamelModel):
    word: str
    count: int = Field(0, ge=0)


class CompanyMatchInsight(CamelModel):
    company_name: str
    avg_match_rate: float = 0.0
    reason: str = ""


class PositionMatchInsight(CamelModel):
    position: str
    avg_match_rate: float = 0.0
    reason: str = ""


class MatchInsights(CamelModel):
    high_match_companies: List[CompanyMatchInsight] = Field(default_factory=list)
    low_match_companies: List[CompanyMatchInsight] = Field(default_factory=list)
    recommended_job_positions: List[PositionMatchInsight] = Field(default_factory=list)
    career_advice: str = ""

    @field_validator("high_match_companies", "low_match_companies", "recommended_job_positions")
    @classmethod
    def cap_bucket(cls, value: list) -> list:
        return value[:MAX_INSIGHT_ITEMS]


class TrendSummaryPayload(CamelModel):
    """Aggregate trend analysis as returned to clients and stored."""

    overall_trend: str
    top_industries: List[TopIndustry] = Field(default_factory=list)
    common_keywords: List[CommonKeyword] = Field(default_factory=list)
    recommended_skills: List[str] = Field(default_factory=list)
    match_insights: Optional[MatchInsights] = None

    @field_validator("top_industries", "common_keywords", mode="after")
    @classmethod
    def rank_by_count(cls, value: list) -> list:
        ranked = sorted(value, key=lambda item: item.count, reverse=True)
        return ranked[:MAX_RANKED_ITEMS]

    @field_validator("recommended_skills", mode="after")
    @classmethod
    def drop_blank_skills(cls, value: List[str]) -> List[str]:
        return [skill for skill in value if skill.strip()]

    @model_validator(mode="after")
    def bound_percentages(self) -> "TrendSummaryPayload":
        total = sum(item.percentage for item in self.top_industries)
        if total > 100.0:
            # Rescale, rounding down to one decimal so the sum stays <= 100
            for item in self.top_industries:
                item.percentage = math.floor(item.percentage * 1000 / total) / 10
        return self


class JobPositionStat(CamelModel):
    position: str
    count: int
    avg_company_match: float
    avg_job_match: float
    companies: List[Dict[str, Any]] = Field(default_factory=list)


class CompanyReviewStat(CamelModel):
    company_name: str
    review_count: int
    avg_company_match: float
    avg_job_match: float


class ReviewStats(CamelModel):
    """Numbers computed locally from reviewed events."""

    total_reviews: int
    avg_company_match: float
    avg_job_match: float
    job_position_stats: List[JobPositionStat] = Field(default_factory=list)
    company_stats: List[CompanyReviewStat] = Field(default_factory=list)
    # Index 0 counts ratings of 1, index 4 ratings of 5
    company_match_distribution: List[int] = Field(default_factory=lambda: [0] * 5)
    job_match_distribution: List[int] = Field(default_factory=lambda: [0] * 5)


class SourceCompany(CamelModel):
    company_id: UUID
    company_name: str


class AnalyzeTrendsResponse(CamelModel):
    success: bool = True
    summary: TrendSummaryPayload
    analyzed_at: datetime
    company_count: int


class TrendRead(UserScopedRead):
    """Schema for reading the stored trend summary."""

    summary: TrendSummaryPayload
    source_companies: List[SourceCompany] = Field(default_factory=list)
    review_stats: Optional[ReviewStats] = None
    analyzed_at: datetime
    company_count: int
    model_used: str
