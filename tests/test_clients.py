import httpx
import pytest

from talentmatch.core.constants import ErrorCodes
from talentmatch.domain.matching.repositories import CandidateFilter
from talentmatch.services.job_client import JobServiceClient
from talentmatch.services.profile_client import ProfileServiceClient
from talentmatch.utils.error_handling import ServiceError

PROFILE = {
    "_id": "u1",
    "skills": [{"name": "Python"}, "SQL"],
    "experienceYears": 5,
    "currentLocation": "Austin, TX",
    "preferredLocation": "Austin",
    "expectedSalary": 110000,
}

POSTING = {
    "_id": "j1",
    "requiredSkills": ["Python"],
    "experienceMin": 1,
    "experienceMax": 3,
    "location": "Austin, TX",
    "remote": False,
    "salaryRange": {"min": 90000, "max": 120000},
    "status": "open",
}


def transport_for(routes):
    """MockTransport answering ``routes[path]`` as (status, json) and 404 otherwise."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path in routes:
            status, body = routes[request.url.path]
            return httpx.Response(status, json=body)
        return httpx.Response(404, json={"success": False})

    return httpx.MockTransport(handler)


class TestProfileServiceClient:
    async def test_wrapped_payload(self):
        client = ProfileServiceClient(
            "http://profiles",
            transport=transport_for({"/api/v1/users/u1/profile": (200, {"success": True, "data": PROFILE})}),
        )

        candidate = await client.get_candidate_profile("u1")

        assert candidate.candidate_id == "u1"
        assert candidate.skills == frozenset({"python", "sql"})
        assert candidate.expected_salary == 110000

    async def test_not_found_is_none(self):
        client = ProfileServiceClient("http://profiles", transport=transport_for({}))
        assert await client.get_candidate_profile("ghost") is None

    async def test_server_error(self):
        client = ProfileServiceClient(
            "http://profiles",
            transport=transport_for({"/api/v1/users/u1/profile": (502, {"error": "bad gateway"})}),
        )
        with pytest.raises(ServiceError) as exc_info:
            await client.get_candidate_profile("u1")
        assert exc_info.value.error_code == ErrorCodes.SERVICE_PROFILE_SERVICE_UNAVAILABLE

    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = ProfileServiceClient("http://profiles", transport=httpx.MockTransport(handler))
        with pytest.raises(ServiceError) as exc_info:
            await client.get_candidate_profile("u1")
        assert isinstance(exc_info.value.original_error, httpx.ConnectError)

    async def test_profiles_query(self):
        seen = {}

        def handler(request):
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"data": [PROFILE, dict(PROFILE, _id="u2")]})

        client = ProfileServiceClient("http://profiles", transport=httpx.MockTransport(handler))
        candidates = await client.get_candidate_profiles(CandidateFilter(candidate_ids=["u1", "u2"], limit=10))

        assert [c.candidate_id for c in candidates] == ["u1", "u2"]
        assert seen["params"] == {"ids": "u1,u2", "limit": "10"}

    async def test_correlation_id_is_forwarded(self):
        from talentmatch.core.monitoring.correlation_tracker import CorrelationTracker

        seen = {}

        def handler(request):
            seen["header"] = request.headers.get("X-Correlation-ID")
            return httpx.Response(200, json=PROFILE)

        CorrelationTracker.set_correlation_id("corr-123")
        try:
            client = ProfileServiceClient("http://profiles", transport=httpx.MockTransport(handler))
            await client.get_candidate_profile("u1")
        finally:
            CorrelationTracker.clear_correlation_id()

        assert seen["header"] == "corr-123"


class TestJobServiceClient:
    async def test_bare_payload(self):
        client = JobServiceClient(
            "http://jobs/", transport=transport_for({"/api/v1/jobs/j1": (200, POSTING)})
        )

        job = await client.get_job_requirement("j1")

        assert job.job_id == "j1"
        assert job.required_skills == ("python",)
        assert job.is_open is True

    async def test_not_found_is_none(self):
        client = JobServiceClient("http://jobs", transport=transport_for({}))
        assert await client.get_job_requirement("missing") is None

    async def test_invalid_json(self):
        def handler(request):
            return httpx.Response(200, content=b"<html>oops</html>")

        client = JobServiceClient("http://jobs", transport=httpx.MockTransport(handler))
        with pytest.raises(ServiceError) as exc_info:
            await client.get_job_requirement("j1")
        assert exc_info.value.error_code == ErrorCodes.SERVICE_JOB_SERVICE_UNAVAILABLE
