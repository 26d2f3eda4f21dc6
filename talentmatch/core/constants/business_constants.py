"""
Business rules for candidate matching and the application lifecycle.
"""


class BusinessRules:
    """Core business logic constants and rules."""

    # Batch matching limits
    DEFAULT_TOP_N = 20
    MAX_TOP_N = 500

    # Score bands used by recruiter dashboards
    HIGH_MATCH_THRESHOLD = 80
    MEDIUM_MATCH_THRESHOLD = 50

    # Location matching
    REMOTE_KEYWORD = "remote"

    # Applicant listing
    DEFAULT_PAGE_SIZE = 20
    MAX_PAGE_SIZE = 100

    # Recruiter notes
    MAX_NOTES_LENGTH = 2000


class ScoringDefaults:
    """Default scoring policy for the match scorer."""

    SKILLS_WEIGHT = 0.4
    EXPERIENCE_WEIGHT = 0.25
    LOCATION_WEIGHT = 0.15
    SALARY_WEIGHT = 0.2

    EXPERIENCE_GRACE_YEARS = 5
    SALARY_TOLERANCE_RATIO = 0.5
    PARTIAL_LOCATION_SCORE = 50

    MAX_SCORE = 100
    MIN_SCORE = 0


class ProcessingLimits:
    """Concurrency limits for batch scoring."""

    DEFAULT_MAX_CONCURRENCY = 8
    DEFAULT_CHUNK_SIZE = 50
