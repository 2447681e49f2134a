"""
Company Pydantic schemas.

Covers the AI analysis payload (current and legacy shapes), analysis
metadata, and the request/response bodies of the company routes.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID
from datetime import datetime

from pydantic import Field, model_validator

from jobmete.schemas.base import CamelModel, UserScopedRead


ANALYSIS_SCHEMA_VERSION = "2.0"
LEGACY_ANALYSIS_SCHEMA_VERSION = "1.0"


# ============================================================================
# Analysis payload
# ============================================================================

class AnalysisSection(CamelModel):
    """Section of a model-produced analysis. Null values fall back to defaults."""

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class CorporateProfile(AnalysisSection):
    business_summary: str = ""
    founded: str = ""
    headquarters: str = ""
    employee_count: str = ""
    main_products: List[str] = Field(default_factory=list)


class MarketAnalysis(AnalysisSection):
    industry: str = ""
    industry_position: str = ""
    strengths: List[str] = Field(default_factory=list)
    competitors: List[str] = Field(default_factory=list)


class FutureDirection(AnalysisSection):
    recent_news: str = ""
    vision: str = ""
    growth_areas: List[str] = Field(default_factory=list)


class WorkEnvironment(AnalysisSection):
    culture: str = ""
    recruitment_insights: str = ""
    desired_talent: List[str] = Field(default_factory=list)


class CompanyAnalysis(AnalysisSection):
    """Current (2.0) four-section analysis."""

    corporate_profile: CorporateProfile = Field(default_factory=CorporateProfile)
    market_analysis: MarketAnalysis = Field(default_factory=MarketAnalysis)
    future_direction: FutureDirection = Field(default_factory=FutureDirection)
    work_environment: WorkEnvironment = Field(default_factory=WorkEnvironment)

    @property
    def industry_label(self) -> str:
        """Industry name, or the position text when the model left it blank."""
        return self.market_analysis.industry or self.market_analysis.industry_position


class LegacyCompanyAnalysis(AnalysisSection):
    """Flat analysis shape stored by 1.0 records."""

    business_overview: str = ""
    strengths: List[str] = Field(default_factory=list)
    recent_news: str = ""
    industry_position: str = ""
    recruitment_insights: str = ""

    def to_current(self) -> CompanyAnalysis:
        return CompanyAnalysis(
            corporate_profile=CorporateProfile(business_summary=self.business_overview),
            market_analysis=MarketAnalysis(
                industry_position=self.industry_position,
                strengths=list(self.strengths),
            ),
            future_direction=FutureDirection(recent_news=self.recent_news),
            work_environment=WorkEnvironment(recruitment_insights=self.recruitment_insights),
        )


def decode_analysis(version: Optional[str], payload: Optional[Dict[str, Any]]) -> CompanyAnalysis:
    """
    Decode a stored analysis according to its schema version.

    Records written before versioning was introduced carry no version and
    are treated as 1.0.

    Raises:
        ValueError: If the version is not recognised
    """
    payload = payload or {}
    if version == ANALYSIS_SCHEMA_VERSION:
        return CompanyAnalysis.model_validate(payload)
    if version in (None, "", LEGACY_ANALYSIS_SCHEMA_VERSION):
        return LegacyCompanyAnalysis.model_validate(payload).to_current()
    raise ValueError(f"Unknown analysis schema version: {version}")


class AnalysisMetadata(CamelModel):
    """Bookkeeping stored alongside every analysis."""

    status: str = "completed"  # completed, pending, failed
    model_used: str = ""
    tokens_used: int = 0
    search_sources: List[str] = Field(default_factory=list)
    analyzed_at: Optional[datetime] = None
    version: Optional[str] = None
    needs_update: bool = False
    last_update_check: Optional[datetime] = None
    prompt: Optional[str] = None
    raw_response: Optional[str] = None


# ============================================================================
# Company records
# ============================================================================

class CompanyRead(UserScopedRead):
    """Schema for reading a company (API response)."""

    company_name: str
    normalized_name: str
    analysis: CompanyAnalysis
    analysis_metadata: AnalysisMetadata
    user_notes: str = ""
    event_count: int
    first_registered_at: datetime
    last_event_date: Optional[datetime] = None
    needs_reanalysis: bool = False


class CompanyNotesUpdate(CamelModel):
    """Schema for replacing the user's notes on a company."""

    user_notes: Optional[str] = None


# ============================================================================
# Register / re-analyze
# ============================================================================

class RegisterCompanyRequest(CamelModel):
    company_name: Optional[str] = None


class RegisterCompanyResponse(CamelModel):
    success: bool = True
    company_id: UUID
    is_duplicate: bool


class ReanalyzeCompanyRequest(CamelModel):
    company_id: Optional[str] = None


class ReanalyzeCompanyResponse(CamelModel):
    success: bool = True
    company_id: UUID
    message: str
