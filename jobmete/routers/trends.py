"""
Trend router - aggregate analysis across the caller's companies.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from jobmete.core.dependencies import GeminiAnalysisClient, get_analysis_client, get_current_user, get_db
from jobmete.models.user import User
from jobmete.schemas.trend import AnalyzeTrendsResponse, TrendRead
from jobmete.services.trend_service import TrendService

router = APIRouter(prefix="/trends", tags=["trends"])


@router.post("/analyze", response_model=AnalyzeTrendsResponse)
async def analyze_trends(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    analysis_client: GeminiAnalysisClient = Depends(get_analysis_client),
):
    """
    Generate a new trend summary.

    Requires at least TREND_MIN_COMPANIES registered companies; the stored
    summary is replaced.
    """
    service = TrendService(db, analysis_client)
    result = await service.analyze_trends(current_user.id)
    return AnalyzeTrendsResponse(
        summary=result.summary,
        analyzed_at=result.analyzed_at,
        company_count=result.company_count,
    )


@router.get("/latest", response_model=TrendRead)
async def get_latest_trend(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Return the stored trend summary."""
    service = TrendService(db)
    trend = await service.get_latest(current_user.id)
    return service.to_read(trend)
