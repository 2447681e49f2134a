"""
Schemas package.

Import all schemas here for easy access.
"""

from jobmete.schemas.base import CamelModel, SuccessResponse, UserScopedRead
from jobmete.schemas.user import UserCreate, UserRead, LoginRequest, LoginResponse, TokenData
from jobmete.schemas.company import (
    AnalysisMetadata,
    CompanyAnalysis,
    CompanyNotesUpdate,
    CompanyRead,
    ReanalyzeCompanyRequest,
    ReanalyzeCompanyResponse,
    RegisterCompanyRequest,
    RegisterCompanyResponse,
    decode_analysis,
)
from jobmete.schemas.event import (
    CreateEventResponse,
    EventCreate,
    EventRead,
    EventReview,
    EventReviewRequest,
    EventUpdate,
)
from jobmete.schemas.trend import (
    AnalyzeTrendsResponse,
    ReviewStats,
    TrendRead,
    TrendSummaryPayload,
)

__all__ = [
    "CamelModel",
    "SuccessResponse",
    "UserScopedRead",
    "UserCreate",
    "UserRead",
    "LoginRequest",
    "LoginResponse",
    "TokenData",
    "AnalysisMetadata",
    "CompanyAnalysis",
    "CompanyNotesUpdate",
    "CompanyRead",
    "ReanalyzeCompanyRequest",
    "ReanalyzeCompanyResponse",
    "RegisterCompanyRequest",
    "RegisterCompanyResponse",
    "decode_analysis",
    "CreateEventResponse",
    "EventCreate",
    "EventRead",
    "EventReview",
    "EventReviewRequest",
    "EventUpdate",
    "AnalyzeTrendsResponse",
    "ReviewStats",
    "TrendRead",
    "TrendSummaryPayload",
]
