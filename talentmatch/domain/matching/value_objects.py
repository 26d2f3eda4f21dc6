"""
Matching domain value objects: read-only snapshots of candidates and jobs.

Snapshots are built per matching request from the externally owned profile
and job documents and are never mutated by the engine.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple

from talentmatch.core.constants import BusinessRules
from talentmatch.utils.error_handling import ValidationError


def canonicalize_skill(skill: Any) -> str:
    """Canonical skill form: trimmed and lowercased."""
    return str(skill).strip().lower()


def canonicalize_location(location: Optional[str]) -> str:
    """Canonical location form: lowercased with whitespace collapsed."""
    if not location:
        return ""
    return " ".join(str(location).lower().split())


def _skill_name(entry: Any) -> str:
    # Profiles store skills either as plain strings or as {"name": ...} objects
    if isinstance(entry, dict):
        return entry.get("name") or ""
    return entry


def _require_non_negative_int(value: Any, field_name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(
            f"{field_name} must be an integer", field_name=field_name, field_value=value
        )
    if value < 0:
        raise ValidationError(
            f"{field_name} cannot be negative", field_name=field_name, field_value=value
        )


def _require_non_negative_number(value: Any, field_name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(
            f"{field_name} must be a number", field_name=field_name, field_value=value
        )
    if value < 0:
        raise ValidationError(
            f"{field_name} cannot be negative", field_name=field_name, field_value=value
        )


def _as_int(value: Any, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            f"{field_name} must be an integer", field_name=field_name, field_value=value
        ) from e


def _as_optional_number(value: Any, field_name: str) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            f"{field_name} must be a number", field_name=field_name, field_value=value
        ) from e


def _document_id(document: Dict[str, Any], field_name: str) -> str:
    identifier = document.get("id", document.get("_id"))
    if identifier is None or str(identifier).strip() == "":
        raise ValidationError(f"{field_name} is required", field_name=field_name)
    return str(identifier)


@dataclass(frozen=True)
class SalaryRange:
    """Offered salary range."""

    min: float
    max: float

    def __post_init__(self):
        _require_non_negative_number(self.min, "salaryRange.min")
        _require_non_negative_number(self.max, "salaryRange.max")
        if self.min > self.max:
            raise ValidationError(
                "salaryRange.min cannot exceed salaryRange.max",
                field_name="salaryRange",
                field_value={"min": self.min, "max": self.max},
            )

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["SalaryRange"]:
        if not data:
            return None
        return cls(
            min=_as_optional_number(data.get("min"), "salaryRange.min") or 0,
            max=_as_optional_number(data.get("max"), "salaryRange.max") or 0,
        )


@dataclass(frozen=True)
class CandidateProfile:
    """Subset of a user profile that takes part in matching."""

    candidate_id: str
    skills: FrozenSet[str] = field(default_factory=frozenset)
    experience_years: int = 0
    location: str = ""
    remote_ok: bool = False
    expected_salary: Optional[float] = None

    def __post_init__(self):
        if not self.candidate_id or not str(self.candidate_id).strip():
            raise ValidationError("candidateId is required", field_name="candidateId")
        if isinstance(self.skills, str):
            raise ValidationError(
                "skills must be a collection of strings", field_name="skills", field_value=self.skills
            )

        # Normalize skills; empty entries are dropped
        canonical = frozenset(
            name for name in (canonicalize_skill(s) for s in self.skills) if name
        )
        object.__setattr__(self, "candidate_id", str(self.candidate_id))
        object.__setattr__(self, "skills", canonical)

        _require_non_negative_int(self.experience_years, "experienceYears")
        if self.expected_salary is not None:
            _require_non_negative_number(self.expected_salary, "expectedSalary")

    @classmethod
    def from_user_profile(cls, profile: Dict[str, Any]) -> "CandidateProfile":
        """Build a snapshot from a user profile document."""
        preferred = profile.get("preferredLocation") or ""
        location = profile.get("currentLocation") or preferred
        return cls(
            candidate_id=_document_id(profile, "candidateId"),
            skills=frozenset(_skill_name(s) for s in profile.get("skills") or []),
            experience_years=_as_int(profile.get("experienceYears") or 0, "experienceYears"),
            location=location,
            remote_ok=BusinessRules.REMOTE_KEYWORD in str(preferred).lower(),
            expected_salary=_as_optional_number(profile.get("expectedSalary"), "expectedSalary"),
        )


@dataclass(frozen=True)
class JobRequirement:
    """Subset of a job posting that takes part in matching."""

    job_id: str
    required_skills: Tuple[str, ...] = ()
    experience_min: int = 0
    experience_max: int = 0
    location: str = ""
    remote: bool = False
    salary_range: Optional[SalaryRange] = None
    is_open: bool = True

    def __post_init__(self):
        if not self.job_id or not str(self.job_id).strip():
            raise ValidationError("jobId is required", field_name="jobId")
        if isinstance(self.required_skills, str):
            raise ValidationError(
                "requiredSkills must be a list of strings",
                field_name="requiredSkills",
                field_value=self.required_skills,
            )

        canonical = []
        for skill in self.required_skills:
            name = canonicalize_skill(skill)
            if not name:
                continue
            if name in canonical:
                raise ValidationError(
                    f"requiredSkills contains duplicate skill '{name}'",
                    field_name="requiredSkills",
                    field_value=name,
                )
            canonical.append(name)
        object.__setattr__(self, "job_id", str(self.job_id))
        object.__setattr__(self, "required_skills", tuple(canonical))

        _require_non_negative_int(self.experience_min, "experienceMin")
        _require_non_negative_int(self.experience_max, "experienceMax")
        if self.experience_min > self.experience_max:
            raise ValidationError(
                "experienceMin cannot exceed experienceMax",
                field_name="experienceMin",
                field_value=self.experience_min,
            )

    @classmethod
    def from_job_posting(cls, posting: Dict[str, Any]) -> "JobRequirement":
        """Build a snapshot from a job posting document."""
        return cls(
            job_id=_document_id(posting, "jobId"),
            required_skills=tuple(_skill_name(s) for s in posting.get("requiredSkills") or []),
            experience_min=_as_int(posting.get("experienceMin") or 0, "experienceMin"),
            experience_max=_as_int(posting.get("experienceMax") or 0, "experienceMax"),
            location=posting.get("location") or "",
            remote=bool(posting.get("remote", False)),
            salary_range=SalaryRange.from_dict(posting.get("salaryRange")),
            is_open=str(posting.get("status", "open")).lower() != "closed",
        )


def validate_snapshots(
    candidates: Iterable[CandidateProfile] = (), jobs: Iterable[JobRequirement] = ()
) -> None:
    """Reject anything that is not a snapshot before a batch starts."""
    for candidate in candidates:
        if not isinstance(candidate, CandidateProfile):
            raise ValidationError("Candidate pool must contain CandidateProfile snapshots")
    for job in jobs:
        if not isinstance(job, JobRequirement):
            raise ValidationError("Job list must contain JobRequirement snapshots")
