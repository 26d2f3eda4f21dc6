# talentmatch/schemas/matching.py

from typing import List, Optional

from pydantic import Field

from talentmatch.domain.matching.entities import JobMatchOutcome, MatchResult, RankedMatch

from .common import CamelModel


# --- Request Schemas ---
class JobMatchRequest(CamelModel):
    """
    Optional body of "match job for all users".
    Without ``candidateIds`` every candidate of the profile service is matched.
    """

    candidate_ids: Optional[List[str]] = None


class CandidateMatchRequest(CamelModel):
    """Jobs to rank for one candidate."""

    job_ids: List[str] = Field(default_factory=list)
    top_n: Optional[int] = None


# --- Response Schemas ---
class MatchResultSchema(CamelModel):
    match_score: int
    skills_match: int
    experience_match: int
    location_match: int
    salary_match: int
    matched_skills: List[str]
    missing_skills: List[str]
    band: str

    @classmethod
    def from_entity(cls, result: MatchResult) -> "MatchResultSchema":
        return cls(
            match_score=result.match_score,
            skills_match=result.skills_match,
            experience_match=result.experience_match,
            location_match=result.location_match,
            salary_match=result.salary_match,
            matched_skills=list(result.matched_skills),
            missing_skills=list(result.missing_skills),
            band=result.band.value,
        )


class RankedMatchSchema(MatchResultSchema):
    """One ranked row; the breakdown is flattened next to the ids."""

    rank: int
    candidate_id: str
    job_id: str

    @classmethod
    def from_ranked(cls, match: RankedMatch) -> "RankedMatchSchema":
        breakdown = MatchResultSchema.from_entity(match.result).model_dump()
        return cls(
            rank=match.rank,
            candidate_id=match.candidate_id,
            job_id=match.job_id,
            **breakdown,
        )


class JobMatchResponse(CamelModel):
    job_id: str
    total_scored: int
    matches: List[RankedMatchSchema]
    persisted_application_ids: List[str]

    @classmethod
    def from_outcome(cls, outcome: JobMatchOutcome) -> "JobMatchResponse":
        return cls(
            job_id=outcome.job_id,
            total_scored=outcome.total_scored,
            matches=[RankedMatchSchema.from_ranked(m) for m in outcome.matches],
            persisted_application_ids=outcome.persisted_application_ids,
        )


class CandidateMatchResponse(CamelModel):
    candidate_id: str
    matches: List[RankedMatchSchema]
