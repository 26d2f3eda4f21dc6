import pytest

from talentmatch.core.constants import ErrorCodes
from talentmatch.domain.matching.value_objects import (
    CandidateProfile,
    JobRequirement,
    SalaryRange,
    canonicalize_location,
    canonicalize_skill,
)
from talentmatch.utils.error_handling import ValidationError


class TestCanonicalization:
    def test_skill(self):
        assert canonicalize_skill("  PyThon ") == "python"

    def test_location(self):
        assert canonicalize_location("  New   York, NY ") == "new york, ny"
        assert canonicalize_location(None) == ""


class TestCandidateProfile:
    def test_skills_are_canonical_and_empty_entries_dropped(self):
        candidate = CandidateProfile(candidate_id="c1", skills=["Python", " python", "", "  "])
        assert candidate.skills == frozenset({"python"})

    def test_negative_experience_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            CandidateProfile(candidate_id="c1", experience_years=-1)
        assert exc_info.value.field_name == "experienceYears"
        assert exc_info.value.error_code == ErrorCodes.VALIDATION_INVALID_FORMAT

    def test_negative_salary_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            CandidateProfile(candidate_id="c1", expected_salary=-10)
        assert exc_info.value.field_name == "expectedSalary"

    def test_id_is_required(self):
        with pytest.raises(ValidationError) as exc_info:
            CandidateProfile(candidate_id="")
        assert exc_info.value.field_name == "candidateId"

    def test_from_user_profile(self):
        candidate = CandidateProfile.from_user_profile(
            {
                "_id": "u1",
                "skills": ["Python", {"name": "SQL"}, ""],
                "experienceYears": "4",
                "currentLocation": "Austin, TX",
                "preferredLocation": "Remote (US)",
                "expectedSalary": 120000,
            }
        )
        assert candidate.candidate_id == "u1"
        assert candidate.skills == frozenset({"python", "sql"})
        assert candidate.experience_years == 4
        assert candidate.location == "Austin, TX"
        assert candidate.remote_ok is True
        assert candidate.expected_salary == 120000

    def test_from_user_profile_defaults(self):
        candidate = CandidateProfile.from_user_profile({"id": 7, "preferredLocation": "Denver"})
        assert candidate.candidate_id == "7"
        assert candidate.skills == frozenset()
        assert candidate.experience_years == 0
        assert candidate.location == "Denver"
        assert candidate.remote_ok is False
        assert candidate.expected_salary is None

    def test_from_user_profile_without_id(self):
        with pytest.raises(ValidationError):
            CandidateProfile.from_user_profile({"skills": ["go"]})


class TestJobRequirement:
    def test_experience_range_is_validated(self):
        with pytest.raises(ValidationError) as exc_info:
            JobRequirement(job_id="j1", experience_min=6, experience_max=3)
        assert exc_info.value.field_name == "experienceMin"

    def test_duplicate_skills_after_canonicalization(self):
        with pytest.raises(ValidationError) as exc_info:
            JobRequirement(job_id="j1", required_skills=("JS", "js "), experience_max=1)
        assert exc_info.value.field_name == "requiredSkills"

    def test_required_skills_keep_order(self):
        job = JobRequirement(job_id="j1", required_skills=("Node", "Go", "AWS"), experience_max=1)
        assert job.required_skills == ("node", "go", "aws")

    def test_from_job_posting(self):
        job = JobRequirement.from_job_posting(
            {
                "_id": "j9",
                "requiredSkills": ["React", "TypeScript"],
                "experienceMin": 2,
                "experienceMax": 4,
                "location": "Remote",
                "remote": True,
                "salaryRange": {"min": 90000, "max": 120000},
                "status": "closed",
            }
        )
        assert job.job_id == "j9"
        assert job.required_skills == ("react", "typescript")
        assert job.remote is True
        assert job.salary_range == SalaryRange(90000, 120000)
        assert job.is_open is False

    def test_from_job_posting_defaults_to_open(self):
        job = JobRequirement.from_job_posting({"id": "j1"})
        assert job.is_open is True
        assert job.salary_range is None


class TestSalaryRange:
    def test_min_above_max(self):
        with pytest.raises(ValidationError) as exc_info:
            SalaryRange(100, 50)
        assert exc_info.value.field_name == "salaryRange"

    def test_negative_bound(self):
        with pytest.raises(ValidationError) as exc_info:
            SalaryRange(-1, 50)
        assert exc_info.value.field_name == "salaryRange.min"
