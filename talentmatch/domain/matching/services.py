"""
Matching domain services: batch ranking and "match job for all users".
"""

import asyncio
import logging
import threading
import weakref
from concurrent.futures import Executor
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple, TypeVar

from talentmatch.config.matching_config import MatchingConfig
from talentmatch.domain.applications.entities import Application
from talentmatch.domain.applications.repositories import ApplicationRepository
from talentmatch.utils.error_handling import (
    InvalidArgumentError,
    MatchCancelledError,
    ResourceNotFoundError,
)

from .entities import JobMatchOutcome, MatchResult, RankedMatch
from .repositories import CandidateFilter, CandidateProfileSource, JobRequirementSource
from .scorer import MatchScorer
from .value_objects import CandidateProfile, JobRequirement, validate_snapshots

logger = logging.getLogger(__name__)

T = TypeVar("T")

# (candidate, job) pairs in, (candidate_id, job_id, result) rows out
ScoredRow = Tuple[str, str, MatchResult]


class CancellationToken:
    """
    Cooperative cancellation flag for batch matching.

    Thread-safe: it is set from the event loop and read inside executor threads.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, scored: int = 0, total: int = 0) -> None:
        if self._event.is_set():
            raise MatchCancelledError(scored=scored, total=total)


def _find_duplicate(ids: Sequence[str]) -> Optional[str]:
    seen = set()
    for identifier in ids:
        if identifier in seen:
            return identifier
        seen.add(identifier)
    return None


class BatchMatcher:
    """
    Scores one job against many candidates (or the reverse) and ranks the results.

    The pool is split into chunks that are scored on an executor, with at most
    ``max_concurrency`` chunks in flight. Every pair is scored; there is no
    early exit once the top N is known.
    """

    def __init__(
        self,
        scorer: Optional[MatchScorer] = None,
        config: Optional[MatchingConfig] = None,
        executor: Optional[Executor] = None,
    ):
        self.config = config or MatchingConfig()
        self.scorer = scorer or MatchScorer(self.config)
        self.executor = executor

    def resolve_top_n(self, top_n: Optional[int]) -> int:
        if top_n is None:
            return self.config.default_top_n
        if isinstance(top_n, bool) or not isinstance(top_n, int) or top_n <= 0:
            raise InvalidArgumentError(
                "topN must be a positive integer", argument_name="topN", argument_value=top_n
            )
        if top_n > self.config.max_top_n:
            raise InvalidArgumentError(
                f"topN cannot exceed {self.config.max_top_n}",
                argument_name="topN",
                argument_value=top_n,
            )
        return top_n

    async def match_job_against_candidates(
        self,
        job: JobRequirement,
        candidates: Sequence[CandidateProfile],
        top_n: Optional[int] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[RankedMatch]:
        """
        Rank ``candidates`` for ``job``.

        Order: match score desc, skills match desc, candidate id asc.

        Raises:
            InvalidArgumentError: Bad ``top_n`` or duplicate candidate ids
            ValidationError: Job or pool entries are not valid snapshots
            MatchCancelledError: ``cancel_token`` was cancelled mid-batch
        """
        top_n = self.resolve_top_n(top_n)
        validate_snapshots(candidates=candidates, jobs=[job])

        duplicate = _find_duplicate([c.candidate_id for c in candidates])
        if duplicate is not None:
            raise InvalidArgumentError(
                f"Candidate pool contains duplicate id '{duplicate}'",
                argument_name="candidates",
                argument_value=duplicate,
            )
        if not candidates:
            return []

        rows = await self._score_pairs([(c, job) for c in candidates], cancel_token)
        rows.sort(key=lambda row: (-row[2].match_score, -row[2].skills_match, row[0]))
        return self._rank(rows[:top_n])

    async def match_candidate_against_jobs(
        self,
        candidate: CandidateProfile,
        jobs: Sequence[JobRequirement],
        top_n: Optional[int] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[RankedMatch]:
        """Rank ``jobs`` for ``candidate``; ties fall back to job id ascending."""
        top_n = self.resolve_top_n(top_n)
        validate_snapshots(candidates=[candidate], jobs=jobs)

        duplicate = _find_duplicate([j.job_id for j in jobs])
        if duplicate is not None:
            raise InvalidArgumentError(
                f"Job list contains duplicate id '{duplicate}'",
                argument_name="jobs",
                argument_value=duplicate,
            )
        if not jobs:
            return []

        rows = await self._score_pairs([(candidate, j) for j in jobs], cancel_token)
        rows.sort(key=lambda row: (-row[2].match_score, -row[2].skills_match, row[1]))
        return self._rank(rows[:top_n])

    @staticmethod
    def _rank(rows: List[ScoredRow]) -> List[RankedMatch]:
        return [
            RankedMatch(candidate_id=cid, job_id=jid, result=result, rank=position)
            for position, (cid, jid, result) in enumerate(rows, start=1)
        ]

    async def _score_pairs(
        self,
        pairs: List[Tuple[CandidateProfile, JobRequirement]],
        cancel_token: Optional[CancellationToken],
    ) -> List[ScoredRow]:
        chunk_size = self.config.chunk_size
        chunks = [pairs[i : i + chunk_size] for i in range(0, len(pairs), chunk_size)]
        total = len(pairs)
        progress = {"scored": 0}

        loop = asyncio.get_running_loop()
        semaphore = asyncio.Semaphore(self.config.max_concurrency)

        async def run_chunk(chunk):
            async with semaphore:
                if cancel_token is not None:
                    cancel_token.raise_if_cancelled(progress["scored"], total)
                rows = await loop.run_in_executor(
                    self.executor, self._score_chunk, chunk, cancel_token, total
                )
                progress["scored"] += len(rows)
                return rows

        tasks = [asyncio.ensure_future(run_chunk(chunk)) for chunk in chunks]
        try:
            chunk_rows = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

        logger.debug(f"Scored {total} pairs in {len(chunks)} chunks")
        return [row for rows in chunk_rows for row in rows]

    def _score_chunk(
        self,
        chunk: List[Tuple[CandidateProfile, JobRequirement]],
        cancel_token: Optional[CancellationToken],
        total: int,
    ) -> List[ScoredRow]:
        # Runs on an executor thread
        rows = []
        for candidate, job in chunk:
            if cancel_token is not None:
                cancel_token.raise_if_cancelled(len(rows), total)
            rows.append((candidate.candidate_id, job.job_id, self.scorer.score(candidate, job)))
        return rows


class JobMatchLockRegistry:
    """
    Per-job locks that serialize persisting batch matches, re-matches and
    status changes.

    Locks are held weakly: a job's lock lives only while some caller holds it.
    """

    def __init__(self):
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    def lock_for(self, job_id: str) -> asyncio.Lock:
        lock = self._locks.get(job_id)
        if lock is None:
            lock = self._locks.setdefault(job_id, asyncio.Lock())
        return lock


async def gather_bounded(
    loaders: Sequence[Callable[[], Awaitable[T]]], limit: int
) -> List[T]:
    """Run ``loaders`` with at most ``limit`` in flight, keeping input order."""
    semaphore = asyncio.Semaphore(limit)

    async def run(loader):
        async with semaphore:
            return await loader()

    return list(await asyncio.gather(*(run(loader) for loader in loaders)))


class MatchingDomainService:
    """
    Core domain service for candidate/job matching.

    Loads snapshots from the external sources, ranks them with the batch
    matcher and, for job-level matches, persists the top results onto
    application stubs.
    """

    def __init__(
        self,
        candidate_source: CandidateProfileSource,
        job_source: JobRequirementSource,
        application_repository: ApplicationRepository,
        batch_matcher: BatchMatcher,
        lock_registry: Optional[JobMatchLockRegistry] = None,
    ):
        """Initialize with source, repository and matcher dependencies."""
        self.candidate_source = candidate_source
        self.job_source = job_source
        self.application_repository = application_repository
        self.batch_matcher = batch_matcher
        self.config = batch_matcher.config
        self.lock_registry = lock_registry or JobMatchLockRegistry()

    async def load_job(self, job_id: str) -> JobRequirement:
        job = await self.job_source.get_job_requirement(job_id)
        if job is None:
            raise ResourceNotFoundError("Job", job_id)
        return job

    async def load_candidate(self, candidate_id: str) -> CandidateProfile:
        candidate = await self.candidate_source.get_candidate_profile(candidate_id)
        if candidate is None:
            raise ResourceNotFoundError("Candidate", candidate_id)
        return candidate

    async def match_job(
        self,
        job_id: str,
        top_n: Optional[int] = None,
        candidate_ids: Optional[List[str]] = None,
        persist: Optional[bool] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> JobMatchOutcome:
        """
        Rank candidates for a job and optionally persist the top results.

        Args:
            job_id: Job to match
            top_n: Number of results to keep (defaults to the configured value)
            candidate_ids: Explicit pool; None matches every candidate
            persist: Override the configured persistence policy
            cancel_token: Cancels the batch; nothing is persisted once cancelled

        Returns:
            Ranked matches plus the number scored and the persisted application ids
        """
        self.batch_matcher.resolve_top_n(top_n)
        job = await self.load_job(job_id)

        if candidate_ids is None:
            candidates = await self.candidate_source.get_candidate_profiles(CandidateFilter())
        else:
            duplicate = _find_duplicate(candidate_ids)
            if duplicate is not None:
                raise InvalidArgumentError(
                    f"candidateIds contains duplicate id '{duplicate}'",
                    argument_name="candidateIds",
                    argument_value=duplicate,
                )
            candidates = await gather_bounded(
                [lambda cid=cid: self.load_candidate(cid) for cid in candidate_ids],
                self.config.max_concurrency,
            )

        persist = self.config.persist_results if persist is None else persist
        if not persist:
            matches = await self.batch_matcher.match_job_against_candidates(
                job, candidates, top_n, cancel_token
            )
            return JobMatchOutcome(job_id=job.job_id, matches=matches, total_scored=len(candidates))

        async with self.lock_registry.lock_for(job.job_id):
            matches = await self.batch_matcher.match_job_against_candidates(
                job, candidates, top_n, cancel_token
            )
            if cancel_token is not None:
                cancel_token.raise_if_cancelled(len(candidates), len(candidates))
            persisted = await self._persist_matches(job.job_id, matches)

        logger.info(
            f"Matched job {job.job_id} against {len(candidates)} candidates, "
            f"kept {len(matches)}, persisted {len(persisted)}"
        )
        return JobMatchOutcome(
            job_id=job.job_id,
            matches=matches,
            total_scored=len(candidates),
            persisted_application_ids=persisted,
        )

    async def _persist_matches(self, job_id: str, matches: List[RankedMatch]) -> List[str]:
        """Attach results to existing applications or create recommended stubs."""
        persisted = []
        for match in matches:
            if match.result.match_score < self.config.persist_min_score:
                continue

            application = await self.application_repository.find_by_job_and_candidate(
                job_id, match.candidate_id
            )
            if application is None:
                application = Application.recommended(job_id, match.candidate_id, match.result)
            else:
                # Status, notes and origin stay as they are
                application.attach_match(match.result)

            saved = await self.application_repository.upsert_application(application)
            persisted.append(saved.id)
        return persisted

    async def match_candidate(
        self,
        candidate_id: str,
        job_ids: List[str],
        top_n: Optional[int] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[RankedMatch]:
        """Rank the given jobs for one candidate. Nothing is persisted."""
        self.batch_matcher.resolve_top_n(top_n)
        duplicate = _find_duplicate(job_ids)
        if duplicate is not None:
            raise InvalidArgumentError(
                f"jobIds contains duplicate id '{duplicate}'",
                argument_name="jobIds",
                argument_value=duplicate,
            )

        candidate = await self.load_candidate(candidate_id)
        jobs = await gather_bounded(
            [lambda jid=jid: self.load_job(jid) for jid in job_ids],
            self.config.max_concurrency,
        )
        return await self.batch_matcher.match_candidate_against_jobs(
            candidate, jobs, top_n, cancel_token
        )
