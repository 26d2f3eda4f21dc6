"""
Matching domain entities.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from talentmatch.core.constants import BusinessRules


class MatchBand(str, Enum):
    """Score ranges used by recruiter dashboards"""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def for_score(cls, score: int) -> "MatchBand":
        if score >= BusinessRules.HIGH_MATCH_THRESHOLD:
            return cls.HIGH
        if score >= BusinessRules.MEDIUM_MATCH_THRESHOLD:
            return cls.MEDIUM
        return cls.LOW


@dataclass(frozen=True)
class MatchResult:
    """
    Outcome of scoring one candidate against one job.

    ``matched_skills`` and ``missing_skills`` partition the job's required
    skills and both keep the job's ordering.
    """

    match_score: int
    skills_match: int
    experience_match: int
    location_match: int
    salary_match: int
    matched_skills: Tuple[str, ...] = ()
    missing_skills: Tuple[str, ...] = ()

    @property
    def band(self) -> MatchBand:
        return MatchBand.for_score(self.match_score)

    def sub_score(self, name: str) -> int:
        """Look up a score by its API field name (``matchScore``, ``skillsMatch`` ...)."""
        return self.to_dict()[name]

    def to_dict(self) -> Dict[str, Any]:
        """Convert match result to its camelCase wire/storage form."""
        return {
            "matchScore": self.match_score,
            "skillsMatch": self.skills_match,
            "experienceMatch": self.experience_match,
            "locationMatch": self.location_match,
            "salaryMatch": self.salary_match,
            "matchedSkills": list(self.matched_skills),
            "missingSkills": list(self.missing_skills),
            "band": self.band.value,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["MatchResult"]:
        if not data:
            return None
        return cls(
            match_score=int(data["matchScore"]),
            skills_match=int(data["skillsMatch"]),
            experience_match=int(data["experienceMatch"]),
            location_match=int(data["locationMatch"]),
            salary_match=int(data["salaryMatch"]),
            matched_skills=tuple(data.get("matchedSkills") or ()),
            missing_skills=tuple(data.get("missingSkills") or ()),
        )


@dataclass(frozen=True)
class RankedMatch:
    """One row of a batch match, ranked from 1."""

    candidate_id: str
    job_id: str
    result: MatchResult
    rank: int


@dataclass
class JobMatchOutcome:
    """Result of matching one job against a candidate pool."""

    job_id: str
    matches: List[RankedMatch] = field(default_factory=list)
    total_scored: int = 0
    persisted_application_ids: List[str] = field(default_factory=list)
