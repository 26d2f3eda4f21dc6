from typing import List, Optional

from talentmatch.core.constants import ErrorCodes
from talentmatch.domain.matching.repositories import CandidateFilter, CandidateProfileSource
from talentmatch.domain.matching.value_objects import CandidateProfile

from .base_client import ServiceHttpClient


class ProfileServiceClient(ServiceHttpClient, CandidateProfileSource):
    """Reads candidate profile snapshots from the profile service."""

    service_name = "ProfileService"
    error_code = ErrorCodes.SERVICE_PROFILE_SERVICE_UNAVAILABLE

    async def get_candidate_profile(self, candidate_id: str) -> Optional[CandidateProfile]:
        profile = await self.get_json(f"/api/v1/users/{candidate_id}/profile")
        if profile is None:
            return None
        return CandidateProfile.from_user_profile(profile)

    async def get_candidate_profiles(self, candidate_filter: CandidateFilter) -> List[CandidateProfile]:
        params = {}
        if candidate_filter.candidate_ids is not None:
            params["ids"] = ",".join(candidate_filter.candidate_ids)
        if candidate_filter.limit is not None:
            params["limit"] = candidate_filter.limit

        profiles = await self.get_json("/api/v1/users/profiles", params=params)
        if isinstance(profiles, dict):
            profiles = profiles.get("profiles") or []
        return [CandidateProfile.from_user_profile(p) for p in profiles or []]
