"""
Application domain entities representing a candidate's application to a job.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from talentmatch.domain.matching.entities import MatchResult


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ApplicationStatus(str, Enum):
    """Application lifecycle states"""
    APPLIED = "applied"
    REVIEWING = "reviewing"
    REJECTED = "rejected"
    HIRED = "hired"

    @classmethod
    def _missing_(cls, value):
        # Accept "Hired", "HIRED" etc.
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @property
    def is_terminal(self) -> bool:
        return self in (ApplicationStatus.REJECTED, ApplicationStatus.HIRED)


class ApplicationOrigin(str, Enum):
    """How the application came to exist"""
    APPLIED = "applied"
    RECOMMENDED = "recommended"


@dataclass
class Application:
    """
    A candidate's application to a job.

    Status only changes through ``ApplicationLifecycle``. The match result is
    replaced only by an explicit re-match or a batch match.
    """

    job_id: str
    candidate_id: str
    id: str = field(default_factory=lambda: str(uuid4()))
    status: ApplicationStatus = field(default=ApplicationStatus.APPLIED)
    origin: ApplicationOrigin = field(default=ApplicationOrigin.APPLIED)

    match_result: Optional[MatchResult] = field(default=None)
    notes: str = field(default="")

    # Timestamps
    applied_at: datetime = field(default_factory=utc_now)
    matched_at: Optional[datetime] = field(default=None)
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def recommended(cls, job_id: str, candidate_id: str, result: MatchResult) -> "Application":
        """Shortlist stub created by a batch match."""
        application = cls(
            job_id=job_id,
            candidate_id=candidate_id,
            origin=ApplicationOrigin.RECOMMENDED,
        )
        application.attach_match(result)
        return application

    def attach_match(self, result: MatchResult) -> None:
        """Replace the stored match result."""
        now = utc_now()
        self.match_result = result
        self.matched_at = now
        self.updated_at = now

    def record_notes(self, notes: Optional[str]) -> None:
        if notes is None:
            return
        self.notes = notes
        self.updated_at = utc_now()

    def convert_to_applied(self, notes: Optional[str] = None) -> None:
        """Turn a recommended stub into a real application, keeping its status."""
        if self.origin != ApplicationOrigin.RECOMMENDED:
            raise ValueError(f"Cannot convert application with origin: {self.origin}")

        now = utc_now()
        self.origin = ApplicationOrigin.APPLIED
        self.applied_at = now
        self.updated_at = now
        if notes is not None:
            self.notes = notes

    @property
    def match_score(self) -> int:
        """Score used for sorting; applications never matched count as 0."""
        return self.match_result.match_score if self.match_result else 0


@dataclass
class TransitionOutcome:
    """Per-item result of a bulk transition."""

    application_id: str
    outcome: str
    application: Optional[Application] = None
    error: Optional[Dict[str, Any]] = None

    FULFILLED = "fulfilled"
    REJECTED = "rejected"

    @property
    def fulfilled(self) -> bool:
        return self.outcome == self.FULFILLED


@dataclass
class BulkTransitionResult:
    """Collected outcomes of ``transition_many``, in request order."""

    outcomes: List[TransitionOutcome] = field(default_factory=list)

    @property
    def fulfilled_count(self) -> int:
        return sum(1 for o in self.outcomes if o.fulfilled)

    @property
    def rejected_count(self) -> int:
        return len(self.outcomes) - self.fulfilled_count

    @property
    def all_failed(self) -> bool:
        return bool(self.outcomes) and self.fulfilled_count == 0
