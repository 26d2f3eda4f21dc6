"""
Application domain service: applying, status changes, re-matching and
recruiter views of a job's applicants.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from talentmatch.core.constants import BusinessRules, ErrorCodes, ErrorMessages
from talentmatch.domain.matching.entities import MatchBand
from talentmatch.domain.matching.repositories import CandidateProfileSource, JobRequirementSource
from talentmatch.domain.matching.scorer import MatchScorer, round_half_up
from talentmatch.domain.matching.services import JobMatchLockRegistry, gather_bounded
from talentmatch.domain.matching.value_objects import CandidateProfile, JobRequirement
from talentmatch.utils.error_handling import (
    BaseApplicationError,
    ConflictError,
    InvalidArgumentError,
    ResourceNotFoundError,
    describe_error,
)

from .entities import (
    Application,
    ApplicationOrigin,
    ApplicationStatus,
    BulkTransitionResult,
    TransitionOutcome,
)
from .lifecycle import ApplicationLifecycle, parse_status, validate_notes
from .repositories import ApplicationFilter, ApplicationRepository

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = (
    "matchScore",
    "skillsMatch",
    "experienceMatch",
    "locationMatch",
    "salaryMatch",
    "appliedAt",
)
SORT_ORDERS = ("asc", "desc")


@dataclass(frozen=True)
class ApplicantQuery:
    """Sorting, paging and filtering for a job's applicant list."""

    sort_by: str = "matchScore"
    order: str = "desc"
    page: int = 1
    limit: int = BusinessRules.DEFAULT_PAGE_SIZE
    status: Optional[ApplicationStatus] = None

    def __post_init__(self):
        if self.sort_by not in SORTABLE_FIELDS:
            raise InvalidArgumentError(
                f"sortBy must be one of {', '.join(SORTABLE_FIELDS)}",
                argument_name="sortBy",
                argument_value=self.sort_by,
            )
        if self.order not in SORT_ORDERS:
            raise InvalidArgumentError(
                "order must be 'asc' or 'desc'", argument_name="order", argument_value=self.order
            )
        if self.page < 1:
            raise InvalidArgumentError(
                "page must be at least 1", argument_name="page", argument_value=self.page
            )
        if not 1 <= self.limit <= BusinessRules.MAX_PAGE_SIZE:
            raise InvalidArgumentError(
                f"limit must be between 1 and {BusinessRules.MAX_PAGE_SIZE}",
                argument_name="limit",
                argument_value=self.limit,
            )


@dataclass
class ApplicantPage:
    items: List[Application]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0


@dataclass
class ApplicationSummary:
    """Per-job counts for the recruiter dashboard."""

    job_id: str
    total: int = 0
    by_status: Dict[str, int] = field(default_factory=dict)
    by_band: Dict[str, int] = field(default_factory=dict)
    average_match_score: Optional[float] = None


def _sort_key(sort_by: str):
    if sort_by == "appliedAt":
        return lambda app: app.applied_at
    # Applications without a match result sort as score 0
    return lambda app: app.match_result.sub_score(sort_by) if app.match_result else 0


class ApplicationDomainService:
    """
    Core domain service for the application lifecycle.

    Single-item operations raise typed errors. ``transition_many`` reports
    per-item outcomes instead and never rolls back fulfilled items.
    """

    def __init__(
        self,
        repository: ApplicationRepository,
        candidate_source: CandidateProfileSource,
        job_source: JobRequirementSource,
        scorer: MatchScorer,
        lock_registry: Optional[JobMatchLockRegistry] = None,
    ):
        self.repository = repository
        self.candidate_source = candidate_source
        self.job_source = job_source
        self.scorer = scorer
        self.lock_registry = lock_registry or JobMatchLockRegistry()

    async def _load_job(self, job_id: str) -> JobRequirement:
        job: Optional[JobRequirement] = await self.job_source.get_job_requirement(job_id)
        if job is None:
            raise ResourceNotFoundError("Job", job_id)
        return job

    async def _load_snapshots(self, job_id: str, candidate_id: str):
        job = await self._load_job(job_id)
        candidate: Optional[CandidateProfile] = await self.candidate_source.get_candidate_profile(
            candidate_id
        )
        if candidate is None:
            raise ResourceNotFoundError("Candidate", candidate_id)
        return job, candidate

    async def apply(
        self, job_id: str, candidate_id: str, notes: Optional[str] = None
    ) -> Application:
        """
        Record a candidate's application to a job, scored at application time.

        A recommended stub left by a batch match is converted in place.

        Raises:
            ResourceNotFoundError: Job or candidate does not exist
            ConflictError: Job is closed or the candidate already applied
        """
        validate_notes(notes)
        job, candidate = await self._load_snapshots(job_id, candidate_id)
        if not job.is_open:
            raise ConflictError(
                ErrorMessages.get_message(ErrorCodes.BUSINESS_JOB_CLOSED),
                error_code=ErrorCodes.BUSINESS_JOB_CLOSED,
                details={"job_id": job_id},
            )

        application = await self.repository.find_by_job_and_candidate(job_id, candidate_id)
        if application is not None and application.origin == ApplicationOrigin.APPLIED:
            raise ConflictError(
                ErrorMessages.get_message(ErrorCodes.BUSINESS_DUPLICATE_APPLICATION),
                error_code=ErrorCodes.BUSINESS_DUPLICATE_APPLICATION,
                details={"job_id": job_id, "candidate_id": candidate_id},
            )

        if application is None:
            application = Application(job_id=job_id, candidate_id=candidate_id, notes=notes or "")
        else:
            application.convert_to_applied(notes)

        application.attach_match(self.scorer.score(candidate, job))
        saved = await self.repository.upsert_application(application)
        logger.info(
            f"Candidate {candidate_id} applied to job {job_id} "
            f"(application={saved.id}, score={saved.match_score})"
        )
        return saved

    async def get_application(self, application_id: str) -> Application:
        application = await self.repository.get_application(application_id)
        if application is None:
            raise ResourceNotFoundError("Application", application_id)
        return application

    async def transition(
        self, application_id: str, requested_status, notes: Optional[str] = None
    ) -> Application:
        """
        Change one application's status; raises InvalidTransitionError if not allowed.

        Runs under the job's lock, so it serializes with re-matches and with
        persisting batch matches of the same job.
        """
        application = await self.get_application(application_id)
        async with self.lock_registry.lock_for(application.job_id):
            application = await self.get_application(application_id)
            ApplicationLifecycle.transition(application, requested_status, notes)
            return await self.repository.upsert_application(application)

    async def transition_many(
        self,
        application_ids: List[str],
        requested_status,
        notes: Optional[str] = None,
    ) -> BulkTransitionResult:
        """
        Best-effort bulk status change.

        Each id is loaded, validated and saved on its own. Duplicate ids are
        processed once, in first-seen order. A failing item, expected or not,
        becomes a rejected outcome and the remaining items still run.
        """
        if not application_ids:
            raise InvalidArgumentError(
                "applicationIds cannot be empty", argument_name="applicationIds"
            )
        # Malformed input fails the whole call before any item is touched
        status = parse_status(requested_status)
        validate_notes(notes)

        result = BulkTransitionResult()
        for application_id in dict.fromkeys(application_ids):
            try:
                application = await self.transition(application_id, status, notes)
            except BaseApplicationError as e:
                outcome = TransitionOutcome(
                    application_id=application_id,
                    outcome=TransitionOutcome.REJECTED,
                    error=describe_error(e),
                )
            except Exception as e:
                logger.error(
                    f"Unexpected error moving application {application_id} to {status.value}",
                    exc_info=e,
                )
                outcome = TransitionOutcome(
                    application_id=application_id,
                    outcome=TransitionOutcome.REJECTED,
                    error=describe_error(e),
                )
            else:
                outcome = TransitionOutcome(
                    application_id=application_id,
                    outcome=TransitionOutcome.FULFILLED,
                    application=application,
                )
            result.outcomes.append(outcome)

        logger.info(
            f"Bulk transition to {status.value}: "
            f"{result.fulfilled_count} fulfilled, {result.rejected_count} rejected"
        )
        return result

    async def rematch(self, application_id: str) -> Application:
        """Re-score an application with fresh snapshots. Status is untouched."""
        application = await self.get_application(application_id)

        async with self.lock_registry.lock_for(application.job_id):
            job, candidate = await self._load_snapshots(
                application.job_id, application.candidate_id
            )
            # Status changes take the same lock; reload to pick up the latest one
            application = await self.get_application(application_id)
            application.attach_match(self.scorer.score(candidate, job))
            saved = await self.repository.upsert_application(application)

        logger.info(f"Re-matched application {application_id} (score={saved.match_score})")
        return saved

    async def _candidate_or_none(self, candidate_id: str) -> Optional[CandidateProfile]:
        try:
            return await self.candidate_source.get_candidate_profile(candidate_id)
        except BaseApplicationError as e:
            logger.warning(f"Could not load candidate {candidate_id} for scoring: {e.message}")
            return None

    async def _score_unmatched(self, job: JobRequirement, applications: List[Application]) -> None:
        """
        Give applications without a stored match a score against the current
        snapshots. The scores are shown and sorted on, never persisted.
        Applicants whose profile cannot be loaded keep no score.
        """
        unmatched = [app for app in applications if app.match_result is None]
        if not unmatched:
            return

        candidates = await gather_bounded(
            [lambda cid=app.candidate_id: self._candidate_or_none(cid) for app in unmatched],
            self.scorer.config.max_concurrency,
        )
        for application, candidate in zip(unmatched, candidates):
            if candidate is not None:
                application.match_result = self.scorer.score(candidate, job)

    async def list_applicants(self, job_id: str, query: Optional[ApplicantQuery] = None) -> ApplicantPage:
        """Sorted, paged applicants of a job. Ties are broken by application id."""
        query = query or ApplicantQuery()
        job = await self._load_job(job_id)
        applications = await self.repository.list_applications(
            job_id, ApplicationFilter(status=query.status)
        )
        await self._score_unmatched(job, applications)

        # Two stable sorts: id first, then the requested key
        applications.sort(key=lambda app: app.id)
        applications.sort(key=_sort_key(query.sort_by), reverse=query.order == "desc")

        start = (query.page - 1) * query.limit
        return ApplicantPage(
            items=applications[start : start + query.limit],
            total=len(applications),
            page=query.page,
            limit=query.limit,
        )

    async def summarize(self, job_id: str) -> ApplicationSummary:
        await self._load_job(job_id)
        applications = await self.repository.list_applications(job_id)

        by_status = {status.value: 0 for status in ApplicationStatus}
        by_band = {band.value: 0 for band in MatchBand}
        scores = []
        for application in applications:
            by_status[application.status.value] += 1
            if application.match_result is not None:
                by_band[application.match_result.band.value] += 1
                scores.append(application.match_result.match_score)

        average = round_half_up(10 * sum(scores) / len(scores)) / 10 if scores else None
        return ApplicationSummary(
            job_id=job_id,
            total=len(applications),
            by_status=by_status,
            by_band=by_band,
            average_match_score=average,
        )
