"""
Company business logic service.

Registration deduplicates on the normalized company name and runs the AI
analysis only for names the user has not registered yet.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jobmete.core.config import settings
from jobmete.errors import InternalError, InvalidArgumentError, NotFoundError
from jobmete.models.company import Company
from jobmete.prompts.company_analysis import build_company_analysis_prompt
from jobmete.repositories.company_repository import CompanyRepository
from jobmete.schemas.company import (
    ANALYSIS_SCHEMA_VERSION,
    AnalysisMetadata,
    CompanyAnalysis,
    CompanyRead,
    decode_analysis,
)
from jobmete.services.ai_analysis_service import (
    AIRequestError,
    AIResponseParseError,
    GeminiAnalysisClient,
)
from jobmete.utils.normalizer import normalize_company_name
from jobmete.utils.time import ensure_aware, utc_now
from jobmete.utils.validators import InputLimits, validate_company_name, validate_memo

logger = logging.getLogger(__name__)


@dataclass
class RegistrationResult:
    company: Company
    is_duplicate: bool


def is_analysis_stale(
    analyzed_at: Optional[datetime],
    now: Optional[datetime] = None,
    stale_days: Optional[int] = None,
) -> bool:
    """True when the analysis is missing or at least ``stale_days`` old."""
    if analyzed_at is None:
        return True
    now = now or utc_now()
    stale_days = settings.REANALYSIS_STALE_DAYS if stale_days is None else stale_days
    return now - ensure_aware(analyzed_at) >= timedelta(days=stale_days)


def parse_company_id(company_id: Optional[str]) -> UUID:
    """Validate a client-supplied company id."""
    if company_id is None or not str(company_id).strip():
        raise InvalidArgumentError("companyId is required")
    try:
        return uuid.UUID(str(company_id).strip())
    except ValueError:
        # Not a key we could ever have issued
        raise NotFoundError(f"Company {company_id} not found")


class CompanyService:
    """Service for company registration, analysis and bookkeeping."""

    def __init__(self, db: AsyncSession, analysis_client: Optional[GeminiAnalysisClient] = None):
        self.db = db
        self.repository = CompanyRepository(db)
        self.analysis_client = analysis_client

    async def _analyze(self, company_name: str) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """Run the AI analysis and build the stored analysis + metadata."""
        if self.analysis_client is None:
            raise InternalError("Analysis client is not configured")

        prompt = build_company_analysis_prompt(company_name)
        try:
            result = await self.analysis_client.analyze(prompt)
            analysis = CompanyAnalysis.model_validate(result.payload)
        except (AIRequestError, AIResponseParseError, ValidationError) as exc:
            logger.exception("Company analysis failed for %r", company_name)
            raise InternalError(f"Company analysis failed: {exc}") from exc

        now = utc_now()
        metadata = AnalysisMetadata(
            status="completed",
            model_used=result.metadata.model_used,
            tokens_used=result.metadata.tokens_used,
            search_sources=result.metadata.search_sources,
            analyzed_at=now,
            version=ANALYSIS_SCHEMA_VERSION,
            needs_update=False,
            last_update_check=now,
            prompt=result.metadata.prompt,
            raw_response=result.metadata.raw_response,
        )
        return analysis.model_dump(mode="json", by_alias=True), metadata.model_dump(mode="json")

    async def register_company(self, user_id: UUID, company_name: Optional[str]) -> RegistrationResult:
        """
        Register a company, or return the existing one for the same normalized name.

        No AI call and no stat change happens for a duplicate. A concurrent
        registration that wins the race on the unique index is reported as a
        duplicate too.
        """
        name = validate_company_name(company_name)
        normalized_name = normalize_company_name(name)
        if not normalized_name:
            raise InvalidArgumentError("companyName must contain more than a legal entity type")

        existing = await self.repository.get_by_normalized_name(user_id, normalized_name)
        if existing:
            logger.info("Company %r already registered as %s", name, existing.id)
            return RegistrationResult(company=existing, is_duplicate=True)

        logger.info("Analyzing new company %r for user %s", name, user_id)
        analysis, analysis_metadata = await self._analyze(name)

        try:
            company = await self.repository.create(
                user_id=user_id,
                company_name=name,
                normalized_name=normalized_name,
                analysis=analysis,
                analysis_metadata=analysis_metadata,
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            winner = await self.repository.get_by_normalized_name(user_id, normalized_name)
            if winner is None:
                raise
            logger.info("Concurrent registration of %r resolved to %s", name, winner.id)
            return RegistrationResult(company=winner, is_duplicate=True)

        logger.info("Registered company %r as %s", name, company.id)
        return RegistrationResult(company=company, is_duplicate=False)

    async def reanalyze_company(self, user_id: UUID, company_id: Optional[str]) -> Company:
        """Re-run the analysis and overwrite analysis + metadata. Stats are untouched."""
        company = await self.get_company(user_id, parse_company_id(company_id))

        logger.info("Re-analyzing company %s (%r)", company.id, company.company_name)
        analysis, analysis_metadata = await self._analyze(company.company_name)

        company = await self.repository.update_analysis(company, analysis, analysis_metadata)
        await self.db.commit()
        return company

    async def list_companies(self, user_id: UUID) -> List[Company]:
        return await self.repository.list(user_id)

    async def get_company(self, user_id: UUID, company_id: UUID) -> Company:
        company = await self.repository.get_by_id(user_id, company_id)
        if not company:
            raise NotFoundError(f"Company {company_id} not found")
        return company

    async def update_notes(self, user_id: UUID, company_id: UUID, user_notes: Optional[str]) -> Company:
        notes = validate_memo(user_notes, field="userNotes", max_length=InputLimits.MEMO)
        company = await self.get_company(user_id, company_id)
        company = await self.repository.update_notes(company, notes)
        await self.db.commit()
        return company

    async def delete_company(self, user_id: UUID, company_id: UUID) -> None:
        """Delete a company together with its events."""
        company = await self.get_company(user_id, company_id)
        await self.repository.delete(company)
        await self.db.commit()
        logger.info("Deleted company %s", company_id)

    @staticmethod
    def to_read(company: Company, now: Optional[datetime] = None) -> CompanyRead:
        """Build the API view, decoding the analysis by its schema version."""
        metadata = AnalysisMetadata.model_validate(company.analysis_metadata or {})
        try:
            analysis = decode_analysis(metadata.version, company.analysis)
        except (ValueError, ValidationError) as exc:
            logger.exception("Stored analysis of company %s cannot be decoded", company.id)
            raise InternalError(f"Stored analysis of company {company.id} is invalid") from exc

        return CompanyRead(
            id=company.id,
            user_id=company.user_id,
            created_at=company.created_at,
            updated_at=company.updated_at,
            company_name=company.company_name,
            normalized_name=company.normalized_name,
            analysis=analysis,
            analysis_metadata=metadata,
            user_notes=company.user_notes or "",
            event_count=company.event_count,
            first_registered_at=company.first_registered_at,
            last_event_date=company.last_event_date,
            needs_reanalysis=is_analysis_stale(metadata.analyzed_at, now),
        )
