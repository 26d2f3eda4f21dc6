"""
Matching domain repositories: read-only sources of candidate and job snapshots.

Profiles and job postings are owned by other services. The engine only reads
them through these interfaces.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .value_objects import CandidateProfile, JobRequirement


@dataclass(frozen=True)
class CandidateFilter:
    """Selects the candidate pool for a batch match. ``None`` means everyone."""

    candidate_ids: Optional[List[str]] = None
    limit: Optional[int] = None


class CandidateProfileSource(ABC):
    """Abstract source of candidate profile snapshots."""

    @abstractmethod
    async def get_candidate_profiles(self, candidate_filter: CandidateFilter) -> List[CandidateProfile]:
        """Get the candidate pool selected by ``candidate_filter``."""
        pass

    @abstractmethod
    async def get_candidate_profile(self, candidate_id: str) -> Optional[CandidateProfile]:
        """Get one candidate snapshot, or None if the candidate does not exist."""
        pass


class JobRequirementSource(ABC):
    """Abstract source of job requirement snapshots."""

    @abstractmethod
    async def get_job_requirement(self, job_id: str) -> Optional[JobRequirement]:
        """Get one job snapshot, or None if the job does not exist."""
        pass


class InMemoryCandidateSource(CandidateProfileSource):
    """Dictionary-backed candidate source for tests and embedding."""

    def __init__(self, candidates: Iterable[CandidateProfile] = ()):
        self._candidates: Dict[str, CandidateProfile] = {}
        for candidate in candidates:
            self.add(candidate)

    def add(self, candidate: CandidateProfile) -> None:
        self._candidates[candidate.candidate_id] = candidate

    async def get_candidate_profiles(self, candidate_filter: CandidateFilter) -> List[CandidateProfile]:
        if candidate_filter.candidate_ids is None:
            candidates = list(self._candidates.values())
        else:
            candidates = [
                self._candidates[cid]
                for cid in candidate_filter.candidate_ids
                if cid in self._candidates
            ]
        if candidate_filter.limit is not None:
            candidates = candidates[: candidate_filter.limit]
        return candidates

    async def get_candidate_profile(self, candidate_id: str) -> Optional[CandidateProfile]:
        return self._candidates.get(candidate_id)


class InMemoryJobSource(JobRequirementSource):
    """Dictionary-backed job source for tests and embedding."""

    def __init__(self, jobs: Iterable[JobRequirement] = ()):
        self._jobs: Dict[str, JobRequirement] = {}
        for job in jobs:
            self.add(job)

    def add(self, job: JobRequirement) -> None:
        self._jobs[job.job_id] = job

    async def get_job_requirement(self, job_id: str) -> Optional[JobRequirement]:
        return self._jobs.get(job_id)
