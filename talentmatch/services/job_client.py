from typing import Optional

from talentmatch.core.constants import ErrorCodes
from talentmatch.domain.matching.repositories import JobRequirementSource
from talentmatch.domain.matching.value_objects import JobRequirement

from .base_client import ServiceHttpClient


class JobServiceClient(ServiceHttpClient, JobRequirementSource):
    """Reads job requirement snapshots from the job service."""

    service_name = "JobService"
    error_code = ErrorCodes.SERVICE_JOB_SERVICE_UNAVAILABLE

    async def get_job_requirement(self, job_id: str) -> Optional[JobRequirement]:
        posting = await self.get_json(f"/api/v1/jobs/{job_id}")
        if posting is None:
            return None
        return JobRequirement.from_job_posting(posting)
