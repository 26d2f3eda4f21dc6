"""
Deterministic candidate/job match scorer.

Every sub-score is an integer in 0-100. Rounding is half up so that the same
inputs always produce the same integers regardless of float representation.
"""

import math
from typing import Optional

from talentmatch.config.matching_config import MatchingConfig
from talentmatch.core.constants import ScoringDefaults

from .entities import MatchResult
from .value_objects import CandidateProfile, JobRequirement, canonicalize_location


def round_half_up(value: float) -> int:
    # round(value, 6) absorbs float noise such as 86.79999999999998
    return int(math.floor(round(value, 6) + 0.5))


def _clamp(score: int) -> int:
    return max(ScoringDefaults.MIN_SCORE, min(ScoringDefaults.MAX_SCORE, score))


class MatchScorer:
    """
    Pure scoring function for a (candidate, job) pair.

    Holds only the scoring policy, so a single instance can be shared across
    threads of a batch.
    """

    def __init__(self, config: Optional[MatchingConfig] = None):
        self.config = config or MatchingConfig()

    def score(self, candidate: CandidateProfile, job: JobRequirement) -> MatchResult:
        skills_match, matched, missing = self.score_skills(candidate, job)
        experience_match = self.score_experience(candidate, job)
        location_match = self.score_location(candidate, job)
        salary_match = self.score_salary(candidate, job)

        weights = self.config.weights
        composite = (
            weights.skills * skills_match
            + weights.experience * experience_match
            + weights.location * location_match
            + weights.salary * salary_match
        )

        return MatchResult(
            match_score=_clamp(round_half_up(composite)),
            skills_match=skills_match,
            experience_match=experience_match,
            location_match=location_match,
            salary_match=salary_match,
            matched_skills=matched,
            missing_skills=missing,
        )

    def score_skills(self, candidate: CandidateProfile, job: JobRequirement):
        """Share of required skills the candidate has, plus the matched/missing split."""
        required = job.required_skills
        matched = tuple(skill for skill in required if skill in candidate.skills)
        missing = tuple(skill for skill in required if skill not in candidate.skills)

        if not required:
            return ScoringDefaults.MAX_SCORE, matched, missing
        return round_half_up(100 * len(matched) / len(required)), matched, missing

    def score_experience(self, candidate: CandidateProfile, job: JobRequirement) -> int:
        years = candidate.experience_years
        if years >= job.experience_min:
            # Overqualified candidates are not penalized
            return ScoringDefaults.MAX_SCORE

        shortfall = job.experience_min - years
        grace = self.config.experience_grace_years
        return round_half_up(100 * max(0.0, 1 - shortfall / grace))

    def score_location(self, candidate: CandidateProfile, job: JobRequirement) -> int:
        if job.remote or candidate.remote_ok:
            return ScoringDefaults.MAX_SCORE

        candidate_location = canonicalize_location(candidate.location)
        job_location = canonicalize_location(job.location)
        if not candidate_location or not job_location:
            return ScoringDefaults.MIN_SCORE
        if candidate_location == job_location:
            return ScoringDefaults.MAX_SCORE
        if self._locations_overlap(candidate_location, job_location):
            return self.config.partial_location_score
        return ScoringDefaults.MIN_SCORE

    @staticmethod
    def _locations_overlap(first: str, second: str) -> bool:
        """Same city or state: one contains the other, or a shared comma segment."""
        if first in second or second in first:
            return True
        first_segments = {s.strip() for s in first.split(",") if s.strip()}
        second_segments = {s.strip() for s in second.split(",") if s.strip()}
        return bool(first_segments & second_segments)

    def score_salary(self, candidate: CandidateProfile, job: JobRequirement) -> int:
        salary_range = job.salary_range
        expected = candidate.expected_salary
        if salary_range is None or expected is None:
            return ScoringDefaults.MAX_SCORE
        if expected <= salary_range.max:
            # Expectations below the range minimum also score full marks
            return ScoringDefaults.MAX_SCORE
        if salary_range.max == 0:
            return ScoringDefaults.MIN_SCORE

        overshoot = expected - salary_range.max
        tolerance = self.config.salary_tolerance_ratio * salary_range.max
        return round_half_up(100 * max(0.0, 1 - overshoot / tolerance))
