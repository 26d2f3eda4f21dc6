# talentmatch/schemas/application.py

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field

from talentmatch.core.constants import BusinessRules
from talentmatch.domain.applications.entities import (
    Application,
    BulkTransitionResult,
    TransitionOutcome,
)
from talentmatch.domain.applications.services import ApplicantPage, ApplicationSummary

from .common import CamelModel
from .matching import MatchResultSchema


# --- Request Schemas ---
class ApplyRequest(CamelModel):
    candidate_id: str = Field(..., min_length=1)
    notes: Optional[str] = Field(None, max_length=BusinessRules.MAX_NOTES_LENGTH)


class StatusUpdateRequest(CamelModel):
    status: str
    notes: Optional[str] = Field(None, max_length=BusinessRules.MAX_NOTES_LENGTH)


class BulkStatusUpdateRequest(CamelModel):
    application_ids: List[str]
    status: str
    notes: Optional[str] = Field(None, max_length=BusinessRules.MAX_NOTES_LENGTH)


# --- Response Schemas ---
class ApplicationSchema(CamelModel):
    """An application as returned to the recruiter and candidate UIs."""

    id: str
    job_id: str
    candidate_id: str
    status: str
    origin: str
    match_result: Optional[MatchResultSchema] = None
    notes: str
    applied_at: datetime
    matched_at: Optional[datetime] = None
    updated_at: datetime

    @classmethod
    def from_entity(cls, application: Application) -> "ApplicationSchema":
        result = application.match_result
        return cls(
            id=application.id,
            job_id=application.job_id,
            candidate_id=application.candidate_id,
            status=application.status.value,
            origin=application.origin.value,
            match_result=MatchResultSchema.from_entity(result) if result else None,
            notes=application.notes,
            applied_at=application.applied_at,
            matched_at=application.matched_at,
            updated_at=application.updated_at,
        )


class TransitionOutcomeSchema(CamelModel):
    application_id: str
    outcome: str
    application: Optional[ApplicationSchema] = None
    error: Optional[Dict] = None

    @classmethod
    def from_entity(cls, outcome: TransitionOutcome) -> "TransitionOutcomeSchema":
        return cls(
            application_id=outcome.application_id,
            outcome=outcome.outcome,
            application=(
                ApplicationSchema.from_entity(outcome.application) if outcome.application else None
            ),
            error=outcome.error,
        )


class BulkStatusUpdateResponse(CamelModel):
    results: List[TransitionOutcomeSchema]
    fulfilled: int
    rejected: int

    @classmethod
    def from_result(cls, result: BulkTransitionResult) -> "BulkStatusUpdateResponse":
        return cls(
            results=[TransitionOutcomeSchema.from_entity(o) for o in result.outcomes],
            fulfilled=result.fulfilled_count,
            rejected=result.rejected_count,
        )


class ApplicantPageSchema(CamelModel):
    items: List[ApplicationSchema]
    total: int
    page: int
    limit: int
    pages: int

    @classmethod
    def from_page(cls, page: ApplicantPage) -> "ApplicantPageSchema":
        return cls(
            items=[ApplicationSchema.from_entity(a) for a in page.items],
            total=page.total,
            page=page.page,
            limit=page.limit,
            pages=page.pages,
        )


class ApplicationSummarySchema(CamelModel):
    job_id: str
    total: int
    by_status: Dict[str, int]
    by_band: Dict[str, int]
    average_match_score: Optional[float] = None

    @classmethod
    def from_summary(cls, summary: ApplicationSummary) -> "ApplicationSummarySchema":
        return cls(
            job_id=summary.job_id,
            total=summary.total,
            by_status=summary.by_status,
            by_band=summary.by_band,
            average_match_score=summary.average_match_score,
        )
