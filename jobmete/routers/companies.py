"""
Company router - registration, re-analysis and company records.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from jobmete.core.dependencies import GeminiAnalysisClient, get_analysis_client, get_current_user, get_db
from jobmete.models.user import User
from jobmete.schemas.base import SuccessResponse
from jobmete.schemas.company import (
    CompanyNotesUpdate,
    CompanyRead,
    ReanalyzeCompanyRequest,
    ReanalyzeCompanyResponse,
    RegisterCompanyRequest,
    RegisterCompanyResponse,
)
from jobmete.services.company_service import CompanyService

router = APIRouter(prefix="/companies", tags=["companies"])


@router.post("/register", response_model=RegisterCompanyResponse)
async def register_company(
    data: RegisterCompanyRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    analysis_client: GeminiAnalysisClient = Depends(get_analysis_client),
):
    """
    Register a company by name.

    If a company with the same normalized name already exists, it is
    returned with isDuplicate=true and no analysis is run.
    """
    service = CompanyService(db, analysis_client)
    result = await service.register_company(current_user.id, data.company_name)
    return RegisterCompanyResponse(
        company_id=result.company.id,
        is_duplicate=result.is_duplicate,
    )


@router.post("/reanalyze", response_model=ReanalyzeCompanyResponse)
async def reanalyze_company(
    data: ReanalyzeCompanyRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    analysis_client: GeminiAnalysisClient = Depends(get_analysis_client),
):
    """Re-run the AI analysis of a company. Event statistics are kept."""
    service = CompanyService(db, analysis_client)
    company = await service.reanalyze_company(current_user.id, data.company_id)
    return ReanalyzeCompanyResponse(
        company_id=company.id,
        message="Company analysis updated",
    )


@router.get("", response_model=List[CompanyRead])
async def list_companies(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the caller's companies, newest first."""
    service = CompanyService(db)
    companies = await service.list_companies(current_user.id)
    return [service.to_read(company) for company in companies]


@router.get("/{company_id}", response_model=CompanyRead)
async def get_company(
    company_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get a company by ID."""
    service = CompanyService(db)
    company = await service.get_company(current_user.id, company_id)
    return service.to_read(company)


@router.patch("/{company_id}/notes", response_model=CompanyRead)
async def update_company_notes(
    company_id: UUID,
    data: CompanyNotesUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Replace the caller's notes on a company."""
    service = CompanyService(db)
    company = await service.update_notes(current_user.id, company_id, data.user_notes)
    return service.to_read(company)


@router.delete("/{company_id}", response_model=SuccessResponse)
async def delete_company(
    company_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a company and all of its events."""
    service = CompanyService(db)
    await service.delete_company(current_user.id, company_id)
    return SuccessResponse()
