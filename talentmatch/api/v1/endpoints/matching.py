from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, Request

from talentmatch.core.constants import APIConstants
from talentmatch.dependencies import get_matching_service
from talentmatch.domain.matching.services import MatchingDomainService
from talentmatch.schemas.matching import (
    CandidateMatchRequest,
    CandidateMatchResponse,
    JobMatchRequest,
    JobMatchResponse,
    RankedMatchSchema,
)
from talentmatch.utils.logger import logger
from talentmatch.utils.responses import ResponseHelper, success_response

router = APIRouter(
    tags=["matching"],
    responses={404: {"description": "Not found"}},
)


@router.post("/jobs/{job_id}/match")
async def match_job(
    job_id: str,
    request: Request,
    body: Optional[JobMatchRequest] = Body(None),
    top_n: Optional[int] = Query(None, alias="topN"),
    persist: Optional[bool] = Query(None),
    matching_service: MatchingDomainService = Depends(get_matching_service),
):
    """
    Ranks candidates for a job ("match job for all users").

    With ``persist`` (default from configuration) the top results are written
    onto application stubs; re-running overwrites rather than duplicates.
    """
    correlation_id = ResponseHelper.get_correlation_id(request)
    logger.info(
        "Job match requested",
        job_id=job_id,
        top_n=top_n,
        persist=persist,
        explicit_pool=bool(body and body.candidate_ids is not None),
    )

    outcome = await matching_service.match_job(
        job_id,
        top_n=top_n,
        candidate_ids=body.candidate_ids if body else None,
        persist=persist,
    )

    logger.info(
        "Job match completed",
        job_id=job_id,
        scored=outcome.total_scored,
        returned=len(outcome.matches),
        persisted=len(outcome.persisted_application_ids),
    )
    return success_response(
        data=JobMatchResponse.from_outcome(outcome),
        message=APIConstants.MATCH_COMPLETED,
        meta={"count": len(outcome.matches)},
        correlation_id=correlation_id,
    )


@router.post("/candidates/{candidate_id}/match")
async def match_candidate(
    candidate_id: str,
    body: CandidateMatchRequest,
    request: Request,
    matching_service: MatchingDomainService = Depends(get_matching_service),
):
    """Ranks the given jobs for one candidate. Nothing is persisted."""
    correlation_id = ResponseHelper.get_correlation_id(request)

    matches = await matching_service.match_candidate(
        candidate_id, body.job_ids, top_n=body.top_n
    )

    return success_response(
        data=CandidateMatchResponse(
            candidate_id=candidate_id,
            matches=[RankedMatchSchema.from_ranked(m) for m in matches],
        ),
        message=APIConstants.MATCH_COMPLETED,
        meta={"count": len(matches)},
        correlation_id=correlation_id,
    )
