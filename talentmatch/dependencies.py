"""
Application dependencies providing dependency injection for domain services and infrastructure.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from talentmatch.config import MatchingConfig, get_config, get_matching_config
from talentmatch.db.session import get_db
from talentmatch.domain.applications.repositories import (
    ApplicationRepository,
    SQLAlchemyApplicationRepository,
)
from talentmatch.domain.applications.services import ApplicationDomainService
from talentmatch.domain.matching.repositories import CandidateProfileSource, JobRequirementSource
from talentmatch.domain.matching.scorer import MatchScorer
from talentmatch.domain.matching.services import (
    BatchMatcher,
    JobMatchLockRegistry,
    MatchingDomainService,
)
from talentmatch.services.job_client import JobServiceClient
from talentmatch.services.profile_client import ProfileServiceClient


# --- SHARED STATE ---


@lru_cache()
def get_lock_registry() -> JobMatchLockRegistry:
    """One registry per process so re-matches of a job serialize across requests."""
    return JobMatchLockRegistry()


# --- SOURCE / REPOSITORY DEPENDENCIES ---


def get_candidate_source() -> CandidateProfileSource:
    config = get_config()
    return ProfileServiceClient(config.PROFILE_SERVICE_URL, timeout=config.SERVICE_TIMEOUT_SECONDS)


def get_job_source() -> JobRequirementSource:
    config = get_config()
    return JobServiceClient(config.JOBS_SERVICE_URL, timeout=config.SERVICE_TIMEOUT_SECONDS)


async def get_application_repository(
    db: AsyncSession = Depends(get_db),
) -> ApplicationRepository:
    """Get application repository (async)."""
    return SQLAlchemyApplicationRepository(db)


# --- DOMAIN SERVICE DEPENDENCIES ---


def get_scorer(config: MatchingConfig = Depends(get_matching_config)) -> MatchScorer:
    return MatchScorer(config)


def get_batch_matcher(
    config: MatchingConfig = Depends(get_matching_config),
    scorer: MatchScorer = Depends(get_scorer),
) -> BatchMatcher:
    return BatchMatcher(scorer=scorer, config=config)


async def get_matching_service(
    candidate_source: CandidateProfileSource = Depends(get_candidate_source),
    job_source: JobRequirementSource = Depends(get_job_source),
    repository: ApplicationRepository = Depends(get_application_repository),
    batch_matcher: BatchMatcher = Depends(get_batch_matcher),
    lock_registry: JobMatchLockRegistry = Depends(get_lock_registry),
) -> MatchingDomainService:
    """Get matching domain service with its sources and repository."""
    return MatchingDomainService(
        candidate_source, job_source, repository, batch_matcher, lock_registry
    )


async def get_application_service(
    repository: ApplicationRepository = Depends(get_application_repository),
    candidate_source: CandidateProfileSource = Depends(get_candidate_source),
    job_source: JobRequirementSource = Depends(get_job_source),
    scorer: MatchScorer = Depends(get_scorer),
    lock_registry: JobMatchLockRegistry = Depends(get_lock_registry),
) -> ApplicationDomainService:
    """Get application domain service with its sources and repository."""
    return ApplicationDomainService(repository, candidate_source, job_source, scorer, lock_registry)
