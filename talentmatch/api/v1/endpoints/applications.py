from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from talentmatch.core.constants import APIConstants, BusinessRules
from talentmatch.dependencies import get_application_service
from talentmatch.domain.applications.lifecycle import parse_status
from talentmatch.domain.applications.services import ApplicantQuery, ApplicationDomainService
from talentmatch.schemas.application import (
    ApplicantPageSchema,
    ApplicationSchema,
    ApplicationSummarySchema,
    ApplyRequest,
    BulkStatusUpdateRequest,
    BulkStatusUpdateResponse,
    StatusUpdateRequest,
)
from talentmatch.utils.error_handling import BulkOperationError
from talentmatch.utils.logger import logger
from talentmatch.utils.responses import ResponseHelper, success_response

router = APIRouter(
    tags=["applications"],
    responses={404: {"description": "Not found"}},
)


@router.post("/jobs/{job_id}/applications", status_code=201)
async def apply_to_job(
    job_id: str,
    body: ApplyRequest,
    request: Request,
    application_service: ApplicationDomainService = Depends(get_application_service),
):
    """Records a candidate's application, scored at application time."""
    correlation_id = ResponseHelper.get_correlation_id(request)

    application = await application_service.apply(job_id, body.candidate_id, body.notes)

    return success_response(
        data=ApplicationSchema.from_entity(application),
        message=APIConstants.APPLICATION_CREATED,
        correlation_id=correlation_id,
    )


@router.get("/jobs/{job_id}/applicants")
async def list_applicants(
    job_id: str,
    request: Request,
    sort_by: str = Query("matchScore", alias="sortBy"),
    order: str = Query("desc"),
    page: int = Query(1),
    limit: int = Query(BusinessRules.DEFAULT_PAGE_SIZE),
    status: Optional[str] = Query(None),
    application_service: ApplicationDomainService = Depends(get_application_service),
):
    correlation_id = ResponseHelper.get_correlation_id(request)

    # "all" is what the recruiter filter sends for no filter
    status_filter = parse_status(status) if status and status != "all" else None
    query = ApplicantQuery(
        sort_by=sort_by, order=order.lower(), page=page, limit=limit, status=status_filter
    )
    applicants = await application_service.list_applicants(job_id, query)

    return success_response(
        data=ApplicantPageSchema.from_page(applicants),
        message=APIConstants.APPLICATIONS_RETRIEVED,
        meta={"total": applicants.total, "page": applicants.page, "pages": applicants.pages},
        correlation_id=correlation_id,
    )


@router.get("/jobs/{job_id}/applications/summary")
async def summarize_applications(
    job_id: str,
    request: Request,
    application_service: ApplicationDomainService = Depends(get_application_service),
):
    correlation_id = ResponseHelper.get_correlation_id(request)
    summary = await application_service.summarize(job_id)
    return success_response(
        data=ApplicationSummarySchema.from_summary(summary),
        message=APIConstants.SUMMARY_RETRIEVED,
        correlation_id=correlation_id,
    )


@router.put("/applications/bulk-status")
async def bulk_update_status(
    body: BulkStatusUpdateRequest,
    request: Request,
    application_service: ApplicationDomainService = Depends(get_application_service),
):
    """
    Best-effort bulk status change.

    Responds 200 with per-item outcomes unless every item failed, which is
    reported as BIZ_1609 (422) carrying the same outcomes.
    """
    correlation_id = ResponseHelper.get_correlation_id(request)

    result = await application_service.transition_many(
        body.application_ids, body.status, body.notes
    )
    response = BulkStatusUpdateResponse.from_result(result)

    if result.all_failed:
        logger.warning(
            "Bulk status update failed for every item",
            requested=len(body.application_ids),
            status=body.status,
        )
        raise BulkOperationError(
            [r.model_dump(by_alias=True, mode="json") for r in response.results],
            correlation_id=correlation_id,
        )

    return success_response(
        data=response,
        message=APIConstants.BULK_STATUS_UPDATED,
        meta={"fulfilled": response.fulfilled, "rejected": response.rejected},
        correlation_id=correlation_id,
    )


@router.get("/applications/{application_id}")
async def get_application(
    application_id: str,
    request: Request,
    application_service: ApplicationDomainService = Depends(get_application_service),
):
    correlation_id = ResponseHelper.get_correlation_id(request)
    application = await application_service.get_application(application_id)
    return success_response(
        data=ApplicationSchema.from_entity(application),
        message=APIConstants.APPLICATION_RETRIEVED,
        correlation_id=correlation_id,
    )


@router.put("/applications/{application_id}/status")
async def update_status(
    application_id: str,
    body: StatusUpdateRequest,
    request: Request,
    application_service: ApplicationDomainService = Depends(get_application_service),
):
    correlation_id = ResponseHelper.get_correlation_id(request)

    application = await application_service.transition(application_id, body.status, body.notes)

    logger.info(
        "Application status updated", application_id=application_id, status=application.status.value
    )
    return success_response(
        data=ApplicationSchema.from_entity(application),
        message=APIConstants.STATUS_UPDATED,
        correlation_id=correlation_id,
    )


@router.post("/applications/{application_id}/rematch")
async def rematch_application(
    application_id: str,
    request: Request,
    application_service: ApplicationDomainService = Depends(get_application_service),
):
    correlation_id = ResponseHelper.get_correlation_id(request)
    application = await application_service.rematch(application_id)
    return success_response(
        data=ApplicationSchema.from_entity(application),
        message=APIConstants.REMATCH_COMPLETED,
        correlation_id=correlation_id,
    )
