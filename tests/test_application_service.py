import asyncio
from datetime import datetime, timezone

import pytest

from talentmatch.core.constants import ErrorCodes
from talentmatch.domain.applications.entities import (
    Application,
    ApplicationOrigin,
    ApplicationStatus,
)
from talentmatch.domain.applications.repositories import InMemoryApplicationRepository
from talentmatch.domain.applications.services import ApplicantQuery, ApplicationDomainService
from talentmatch.domain.matching.entities import MatchResult
from talentmatch.utils.error_handling import (
    ConflictError,
    InvalidArgumentError,
    InvalidTransitionError,
    ResourceNotFoundError,
)


class FlakyRepository(InMemoryApplicationRepository):
    """Raises a non-domain error when one particular id is loaded."""

    def __init__(self, fail_on):
        super().__init__()
        self.fail_on = fail_on

    async def get_application(self, application_id):
        if application_id == self.fail_on:
            raise RuntimeError("connection reset")
        return await super().get_application(application_id)


def result_with(score, skills=None):
    skills = score if skills is None else skills
    return MatchResult(
        match_score=score,
        skills_match=skills,
        experience_match=score,
        location_match=score,
        salary_match=score,
    )


@pytest.fixture
def seeded(candidate_source, job_source, candidate_factory, job_factory):
    candidate_source.add(candidate_factory("c1"))
    candidate_source.add(candidate_factory("c2", skills=("js", "react", "node")))
    job_source.add(job_factory("j1"))
    job_source.add(job_factory("closed", is_open=False))


async def store(repository, job_id, candidate_id, score=None, status=ApplicationStatus.APPLIED, app_id=None):
    application = Application(job_id=job_id, candidate_id=candidate_id, status=status)
    if app_id:
        application.id = app_id
    if score is not None:
        application.attach_match(result_with(score))
    return await repository.upsert_application(application)


class TestApply:
    async def test_creates_scored_application(self, application_service, seeded):
        application = await application_service.apply("j1", "c1", notes="referred")

        assert application.status == ApplicationStatus.APPLIED
        assert application.origin == ApplicationOrigin.APPLIED
        assert application.notes == "referred"
        assert application.match_result.match_score == 87
        assert application.matched_at is not None

    async def test_closed_job_is_a_conflict(self, application_service, seeded):
        with pytest.raises(ConflictError) as exc_info:
            await application_service.apply("closed", "c1")
        assert exc_info.value.error_code == ErrorCodes.BUSINESS_JOB_CLOSED

    async def test_second_application_is_a_conflict(self, application_service, seeded):
        await application_service.apply("j1", "c1")
        with pytest.raises(ConflictError) as exc_info:
            await application_service.apply("j1", "c1")
        assert exc_info.value.error_code == ErrorCodes.BUSINESS_DUPLICATE_APPLICATION

    async def test_unknown_job(self, application_service, seeded):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            await application_service.apply("missing", "c1")
        assert exc_info.value.error_code == ErrorCodes.RESOURCE_JOB_NOT_FOUND

    async def test_unknown_candidate(self, application_service, seeded):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            await application_service.apply("j1", "nobody")
        assert exc_info.value.error_code == ErrorCodes.RESOURCE_CANDIDATE_NOT_FOUND

    async def test_converts_recommended_stub(self, application_service, application_repository, seeded):
        stub = Application.recommended("j1", "c1", result_with(10))
        stub.status = ApplicationStatus.REVIEWING
        stub.applied_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
        stub = await application_repository.upsert_application(stub)

        application = await application_service.apply("j1", "c1", notes="now applying")

        assert application.id == stub.id
        assert application.origin == ApplicationOrigin.APPLIED
        assert application.status == ApplicationStatus.REVIEWING
        assert application.applied_at > stub.applied_at
        assert application.match_result.match_score == 87
        assert len(await application_repository.list_applications("j1")) == 1


class TestTransitions:
    async def test_single_transition(self, application_service, application_repository):
        stored = await store(application_repository, "j1", "c1")

        updated = await application_service.transition(stored.id, "reviewing", notes="looks good")

        assert updated.status == ApplicationStatus.REVIEWING
        reloaded = await application_repository.get_application(stored.id)
        assert reloaded.status == ApplicationStatus.REVIEWING
        assert reloaded.notes == "looks good"

    async def test_invalid_transition_raises(self, application_service, application_repository):
        stored = await store(application_repository, "j1", "c1", status=ApplicationStatus.HIRED)
        with pytest.raises(InvalidTransitionError):
            await application_service.transition(stored.id, "reviewing")

    async def test_missing_application(self, application_service):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            await application_service.get_application("nope")
        assert exc_info.value.error_code == ErrorCodes.RESOURCE_APPLICATION_NOT_FOUND

    async def test_bulk_mixed_outcomes_are_not_rolled_back(self, application_service, application_repository):
        valid = await store(application_repository, "j1", "c1")

        result = await application_service.transition_many([valid.id, "missing"], "hired")

        assert [o.outcome for o in result.outcomes] == ["fulfilled", "rejected"]
        assert result.outcomes[0].application.status == ApplicationStatus.HIRED
        assert result.outcomes[1].error["code"] == ErrorCodes.RESOURCE_APPLICATION_NOT_FOUND
        assert result.all_failed is False
        reloaded = await application_repository.get_application(valid.id)
        assert reloaded.status == ApplicationStatus.HIRED

    async def test_bulk_reports_invalid_transitions_per_item(self, application_service, application_repository):
        hired = await store(application_repository, "j1", "c1", status=ApplicationStatus.HIRED)
        applied = await store(application_repository, "j1", "c2")

        result = await application_service.transition_many([hired.id, applied.id], "rejected")

        assert result.outcomes[0].outcome == "rejected"
        assert result.outcomes[0].error["code"] == ErrorCodes.BUSINESS_INVALID_TRANSITION
        assert result.outcomes[0].error["details"]["current_status"] == "hired"
        assert result.outcomes[1].outcome == "fulfilled"

    async def test_bulk_deduplicates_in_first_seen_order(self, application_service, application_repository):
        first = await store(application_repository, "j1", "c1")
        second = await store(application_repository, "j1", "c2")

        result = await application_service.transition_many(
            [second.id, first.id, second.id], "reviewing"
        )

        assert [o.application_id for o in result.outcomes] == [second.id, first.id]
        assert result.fulfilled_count == 2

    async def test_bulk_all_failed(self, application_service):
        result = await application_service.transition_many(["x", "y"], "hired")
        assert result.all_failed is True
        assert result.rejected_count == 2

    async def test_bulk_empty_list(self, application_service):
        with pytest.raises(InvalidArgumentError):
            await application_service.transition_many([], "hired")

    async def test_bulk_unknown_status_fails_whole_call(self, application_service, application_repository):
        stored = await store(application_repository, "j1", "c1")
        with pytest.raises(InvalidArgumentError):
            await application_service.transition_many([stored.id], "ghosted")
        assert (await application_repository.get_application(stored.id)).status == ApplicationStatus.APPLIED

    async def test_bulk_unexpected_error_does_not_abort_batch(
        self, candidate_source, job_source, scorer, lock_registry
    ):
        repository = FlakyRepository(fail_on="boom")
        service = ApplicationDomainService(repository, candidate_source, job_source, scorer, lock_registry)
        first = await store(repository, "j1", "c1", app_id="ok")
        last = await store(repository, "j1", "c2", app_id="later")

        result = await service.transition_many([first.id, "boom", last.id], "hired")

        assert [o.outcome for o in result.outcomes] == ["fulfilled", "rejected", "fulfilled"]
        assert result.outcomes[1].error["code"] == ErrorCodes.SYSTEM_INTERNAL_ERROR
        assert (await repository.get_application(last.id)).status == ApplicationStatus.HIRED

    async def test_transition_waits_for_job_lock(self, application_service, application_repository, lock_registry):
        stored = await store(application_repository, "j1", "c1")
        lock = lock_registry.lock_for("j1")

        await lock.acquire()
        task = asyncio.ensure_future(application_service.transition(stored.id, "reviewing"))
        await asyncio.sleep(0.01)
        assert not task.done()

        lock.release()
        updated = await task
        assert updated.status == ApplicationStatus.REVIEWING


class TestRematch:
    async def test_rescoring_keeps_status(
        self, application_service, application_repository, candidate_source, candidate_factory, seeded
    ):
        application = await application_service.apply("j1", "c1")
        await application_service.transition(application.id, "reviewing")

        # Candidate learned node since applying
        candidate_source.add(candidate_factory("c1", skills=("js", "react", "node")))
        rematched = await application_service.rematch(application.id)

        assert rematched.match_result.match_score == 100
        assert rematched.match_result.missing_skills == ()
        assert rematched.status == ApplicationStatus.REVIEWING

    async def test_missing_application(self, application_service):
        with pytest.raises(ResourceNotFoundError):
            await application_service.rematch("nope")


class TestListApplicants:
    async def test_sorted_by_score_with_unscorable_as_zero(self, application_service, application_repository, seeded):
        await store(application_repository, "j1", "c1", score=40, app_id="a1")
        await store(application_repository, "j1", "ghost", score=None, app_id="a2")
        await store(application_repository, "j1", "c3", score=90, app_id="a3")
        await store(application_repository, "other", "c1", score=99, app_id="a4")

        page = await application_service.list_applicants("j1")

        assert [a.id for a in page.items] == ["a3", "a1", "a2"]
        assert page.items[2].match_result is None
        assert page.total == 3

    async def test_unmatched_applicants_are_scored_for_display(
        self, application_service, application_repository, seeded
    ):
        await store(application_repository, "j1", "c1", score=None, app_id="a1")
        await store(application_repository, "j1", "c2", score=90, app_id="a2")

        page = await application_service.list_applicants("j1")

        assert [a.id for a in page.items] == ["a2", "a1"]
        assert page.items[1].match_result.match_score == 87
        assert (await application_repository.get_application("a1")).match_result is None

    async def test_unknown_job(self, application_service, application_repository):
        await store(application_repository, "no-such-job", "c1", score=50)
        with pytest.raises(ResourceNotFoundError) as exc_info:
            await application_service.list_applicants("no-such-job")
        assert exc_info.value.error_code == ErrorCodes.RESOURCE_JOB_NOT_FOUND

    async def test_ties_broken_by_id(self, application_service, application_repository, seeded):
        for app_id, candidate in (("b", "c1"), ("a", "c2"), ("c", "c3")):
            await store(application_repository, "j1", candidate, score=70, app_id=app_id)

        descending = await application_service.list_applicants("j1")
        ascending = await application_service.list_applicants("j1", ApplicantQuery(order="asc"))

        assert [a.id for a in descending.items] == ["a", "b", "c"]
        assert [a.id for a in ascending.items] == ["a", "b", "c"]

    async def test_sort_by_sub_score_and_status_filter(self, application_service, application_repository, seeded):
        await store(application_repository, "j1", "c1", score=80, app_id="a1")
        await store(application_repository, "j1", "c2", score=60, app_id="a2")
        await store(application_repository, "j1", "c3", score=70, app_id="a3", status=ApplicationStatus.REJECTED)

        page = await application_service.list_applicants(
            "j1", ApplicantQuery(sort_by="skillsMatch", order="asc", status=ApplicationStatus.APPLIED)
        )

        assert [a.id for a in page.items] == ["a2", "a1"]

    async def test_paging(self, application_service, application_repository, seeded):
        for i in range(5):
            await store(application_repository, "j1", f"c{i}", score=10 * i, app_id=f"a{i}")

        page = await application_service.list_applicants("j1", ApplicantQuery(page=2, limit=2))

        assert [a.id for a in page.items] == ["a2", "a1"]
        assert page.total == 5
        assert page.pages == 3

    @pytest.mark.parametrize(
        "kwargs",
        [{"page": 0}, {"limit": 0}, {"limit": 101}, {"sort_by": "name"}, {"order": "up"}],
    )
    def test_invalid_query(self, kwargs):
        with pytest.raises(InvalidArgumentError):
            ApplicantQuery(**kwargs)


class TestSummarize:
    async def test_counts_bands_and_mean(self, application_service, application_repository, seeded):
        await store(application_repository, "j1", "c1", score=85)
        await store(application_repository, "j1", "c2", score=50, status=ApplicationStatus.REVIEWING)
        await store(application_repository, "j1", "c3", score=20, status=ApplicationStatus.HIRED)
        await store(application_repository, "j1", "c4", score=None)

        summary = await application_service.summarize("j1")

        assert summary.total == 4
        assert summary.by_status == {"applied": 2, "reviewing": 1, "rejected": 0, "hired": 1}
        assert summary.by_band == {"high": 1, "medium": 1, "low": 1}
        assert summary.average_match_score == 51.7

    async def test_empty_job(self, application_service, seeded):
        summary = await application_service.summarize("j1")
        assert summary.total == 0
        assert summary.by_status == {"applied": 0, "reviewing": 0, "rejected": 0, "hired": 0}
        assert summary.average_match_score is None

    async def test_unknown_job(self, application_service):
        with pytest.raises(ResourceNotFoundError):
            await application_service.summarize("no-such-job")
