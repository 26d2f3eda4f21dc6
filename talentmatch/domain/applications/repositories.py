"""
Application domain repositories providing data access interfaces and implementations.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from talentmatch.core.constants import ErrorCodes
from talentmatch.domain.matching.entities import MatchResult
from talentmatch.models.application import ApplicationRecord
from talentmatch.utils.error_handling import ConflictError, ServiceError

from .entities import Application, ApplicationOrigin, ApplicationStatus


@dataclass(frozen=True)
class ApplicationFilter:
    """Narrows ``list_applications``. ``None`` fields do not filter."""

    status: Optional[ApplicationStatus] = None

    def matches(self, application: Application) -> bool:
        return self.status is None or application.status == self.status


def _duplicate_pair_error(job_id: str, candidate_id: str) -> ConflictError:
    return ConflictError(
        f"Application for candidate '{candidate_id}' on job '{job_id}' already exists",
        error_code=ErrorCodes.BUSINESS_DUPLICATE_APPLICATION,
        details={"job_id": job_id, "candidate_id": candidate_id},
    )


class ApplicationRepository(ABC):
    """
    Abstract repository interface for applications.

    Applications are never deleted through this interface.
    """

    @abstractmethod
    async def upsert_application(self, application: Application) -> Application:
        """Insert the application, or overwrite the stored one with the same id."""
        pass

    @abstractmethod
    async def get_application(self, application_id: str) -> Optional[Application]:
        """Retrieve an application by its ID."""
        pass

    @abstractmethod
    async def find_by_job_and_candidate(
        self, job_id: str, candidate_id: str
    ) -> Optional[Application]:
        """Retrieve the application of a candidate to a job, if any."""
        pass

    @abstractmethod
    async def list_applications(
        self, job_id: str, application_filter: Optional[ApplicationFilter] = None
    ) -> List[Application]:
        """Get all applications of a job, optionally filtered."""
        pass


class InMemoryApplicationRepository(ApplicationRepository):
    """
    Dictionary-backed repository for tests and embedding.

    Stores copies, so callers never share state with the store.
    """

    def __init__(self):
        self._applications: Dict[str, Application] = {}
        self._lock = asyncio.Lock()

    async def upsert_application(self, application: Application) -> Application:
        async with self._lock:
            existing = await self._find_pair(application.job_id, application.candidate_id)
            if existing is not None and existing.id != application.id:
                raise _duplicate_pair_error(application.job_id, application.candidate_id)

            self._applications[application.id] = replace(application)
            return replace(application)

    async def get_application(self, application_id: str) -> Optional[Application]:
        stored = self._applications.get(application_id)
        return replace(stored) if stored else None

    async def find_by_job_and_candidate(
        self, job_id: str, candidate_id: str
    ) -> Optional[Application]:
        stored = await self._find_pair(job_id, candidate_id)
        return replace(stored) if stored else None

    async def list_applications(
        self, job_id: str, application_filter: Optional[ApplicationFilter] = None
    ) -> List[Application]:
        application_filter = application_filter or ApplicationFilter()
        return [
            replace(app)
            for app in self._applications.values()
            if app.job_id == job_id and application_filter.matches(app)
        ]

    async def _find_pair(self, job_id: str, candidate_id: str) -> Optional[Application]:
        return next(
            (
                app
                for app in self._applications.values()
                if app.job_id == job_id and app.candidate_id == candidate_id
            ),
            None,
        )


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops tzinfo on the way back
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _database_error(message: str, error: SQLAlchemyError) -> ServiceError:
    return ServiceError(
        message,
        service_name="database",
        error_code=ErrorCodes.SERVICE_DATABASE_UNAVAILABLE,
        original_error=error,
    )


class SQLAlchemyApplicationRepository(ApplicationRepository):
    """
    SQLAlchemy implementation of the application repository.

    Each ``upsert_application`` call commits on its own, which makes every
    application update an independent unit of work.
    """

    def __init__(self, db_session: AsyncSession):
        """Initialize with database session."""
        self.db_session = db_session

    async def upsert_application(self, application: Application) -> Application:
        try:
            record = await self.db_session.get(ApplicationRecord, application.id)
            if record is None:
                record = ApplicationRecord(id=application.id)
                self.db_session.add(record)
            self._copy_to_record(application, record)
            await self.db_session.commit()
        except IntegrityError as e:
            await self.db_session.rollback()
            raise _duplicate_pair_error(application.job_id, application.candidate_id) from e
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            raise _database_error(f"Failed to save application {application.id}", e) from e

        return self._convert_to_domain_entity(record)

    async def get_application(self, application_id: str) -> Optional[Application]:
        try:
            # populate_existing so a row changed by another session is not served stale
            record = await self.db_session.get(
                ApplicationRecord, application_id, populate_existing=True
            )
        except SQLAlchemyError as e:
            raise _database_error(f"Failed to load application {application_id}", e) from e
        if not record:
            return None
        return self._convert_to_domain_entity(record)

    async def find_by_job_and_candidate(
        self, job_id: str, candidate_id: str
    ) -> Optional[Application]:
        stmt = (
            select(ApplicationRecord)
            .where(
                ApplicationRecord.job_id == job_id,
                ApplicationRecord.candidate_id == candidate_id,
            )
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.db_session.execute(stmt)
        except SQLAlchemyError as e:
            raise _database_error(
                f"Failed to look up application of {candidate_id} on job {job_id}", e
            ) from e
        record = result.scalars().first()
        return self._convert_to_domain_entity(record) if record else None

    async def list_applications(
        self, job_id: str, application_filter: Optional[ApplicationFilter] = None
    ) -> List[Application]:
        application_filter = application_filter or ApplicationFilter()
        stmt = select(ApplicationRecord).where(ApplicationRecord.job_id == job_id)
        if application_filter.status is not None:
            stmt = stmt.where(ApplicationRecord.status == application_filter.status.value)

        try:
            result = await self.db_session.execute(
                stmt.order_by(ApplicationRecord.id).execution_options(populate_existing=True)
            )
        except SQLAlchemyError as e:
            raise _database_error(f"Failed to list applications of job {job_id}", e) from e
        return [self._convert_to_domain_entity(r) for r in result.scalars().all()]

    @staticmethod
    def _copy_to_record(application: Application, record: ApplicationRecord) -> None:
        result = application.match_result
        record.job_id = application.job_id
        record.candidate_id = application.candidate_id
        record.status = application.status.value
        record.origin = application.origin.value
        record.notes = application.notes
        record.match_score = result.match_score if result else None
        record.match_result = result.to_dict() if result else None
        record.applied_at = application.applied_at
        record.matched_at = application.matched_at
        record.updated_at = application.updated_at

    @staticmethod
    def _convert_to_domain_entity(record: ApplicationRecord) -> Application:
        """Convert ORM model to domain entity."""
        return Application(
            id=record.id,
            job_id=record.job_id,
            candidate_id=record.candidate_id,
            status=ApplicationStatus(record.status),
            origin=ApplicationOrigin(record.origin),
            match_result=MatchResult.from_dict(record.match_result),
            notes=record.notes or "",
            applied_at=_as_utc(record.applied_at),
            matched_at=_as_utc(record.matched_at),
            updated_at=_as_utc(record.updated_at),
        )
