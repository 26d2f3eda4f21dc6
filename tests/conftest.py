"""
Shared fixtures. ENVIRONMENT is set before any talentmatch import so the
cached configuration is the testing one.
"""

import os

os.environ["ENVIRONMENT"] = "testing"

import pytest
from fastapi.testclient import TestClient

from talentmatch.config import MatchingConfig
from talentmatch.config.environments.testing import TestingConfig
from talentmatch.dependencies import (
    get_application_repository,
    get_candidate_source,
    get_job_source,
    get_lock_registry,
)
from talentmatch.domain.applications.repositories import InMemoryApplicationRepository
from talentmatch.domain.applications.services import ApplicationDomainService
from talentmatch.domain.matching.repositories import InMemoryCandidateSource, InMemoryJobSource
from talentmatch.domain.matching.scorer import MatchScorer
from talentmatch.domain.matching.services import (
    BatchMatcher,
    JobMatchLockRegistry,
    MatchingDomainService,
)
from talentmatch.domain.matching.value_objects import CandidateProfile, JobRequirement, SalaryRange
from talentmatch.main import create_app


@pytest.fixture
def candidate_factory():
    """Build candidate snapshots; defaults match the reference example."""

    def _make(
        candidate_id="c1",
        skills=("js", "react"),
        experience_years=3,
        location="NYC",
        remote_ok=False,
        expected_salary=90000,
    ):
        return CandidateProfile(
            candidate_id=candidate_id,
            skills=frozenset(skills),
            experience_years=experience_years,
            location=location,
            remote_ok=remote_ok,
            expected_salary=expected_salary,
        )

    return _make


@pytest.fixture
def job_factory():
    """Build job snapshots; defaults match the reference example."""

    def _make(
        job_id="j1",
        required_skills=("js", "react", "node"),
        experience_min=2,
        experience_max=5,
        location="NYC",
        remote=False,
        salary_range=(80000, 100000),
        is_open=True,
    ):
        return JobRequirement(
            job_id=job_id,
            required_skills=tuple(required_skills),
            experience_min=experience_min,
            experience_max=experience_max,
            location=location,
            remote=remote,
            salary_range=SalaryRange(*salary_range) if salary_range else None,
            is_open=is_open,
        )

    return _make


@pytest.fixture
def matching_config():
    return MatchingConfig(chunk_size=2, max_concurrency=2)


@pytest.fixture
def scorer(matching_config):
    return MatchScorer(matching_config)


@pytest.fixture
def batch_matcher(matching_config, scorer):
    return BatchMatcher(scorer=scorer, config=matching_config)


@pytest.fixture
def candidate_source():
    return InMemoryCandidateSource()


@pytest.fixture
def job_source():
    return InMemoryJobSource()


@pytest.fixture
def application_repository():
    return InMemoryApplicationRepository()


@pytest.fixture
def lock_registry():
    return JobMatchLockRegistry()


@pytest.fixture
def matching_service(candidate_source, job_source, application_repository, batch_matcher, lock_registry):
    return MatchingDomainService(
        candidate_source, job_source, application_repository, batch_matcher, lock_registry
    )


@pytest.fixture
def application_service(candidate_source, job_source, application_repository, scorer, lock_registry):
    return ApplicationDomainService(
        application_repository, candidate_source, job_source, scorer, lock_registry
    )


@pytest.fixture
def client(candidate_source, job_source, application_repository, lock_registry):
    """API client wired to the in-memory sources and repository."""
    app = create_app(TestingConfig())
    app.dependency_overrides[get_candidate_source] = lambda: candidate_source
    app.dependency_overrides[get_job_source] = lambda: job_source
    app.dependency_overrides[get_application_repository] = lambda: application_repository
    app.dependency_overrides[get_lock_registry] = lambda: lock_registry

    with TestClient(app) as test_client:
        yield test_client
