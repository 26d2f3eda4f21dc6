from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from talentmatch.db.base import Base


class ApplicationRecord(Base):
    """Persisted job application with its latest match breakdown"""

    __tablename__ = "applications"
    __table_args__ = (
        # At most one application per (job, candidate) pair
        UniqueConstraint("job_id", "candidate_id", name="uq_applications_job_candidate"),
    )

    id = Column(String(36), primary_key=True)
    job_id = Column(String(64), nullable=False, index=True)
    candidate_id = Column(String(64), nullable=False, index=True)

    # Lifecycle
    status = Column(String(20), nullable=False, default="applied", index=True)  # applied, reviewing, rejected, hired
    origin = Column(String(20), nullable=False, default="applied")  # applied, recommended
    notes = Column(Text, nullable=False, default="")

    # Match breakdown; the score is duplicated for sorting in SQL
    match_score = Column(Integer, nullable=True, index=True)
    match_result = Column(JSON, nullable=True)

    # Timestamps
    applied_at = Column(DateTime(timezone=True), nullable=False, index=True)
    matched_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)
