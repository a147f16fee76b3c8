"""Field conflict API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.api.routes.errors import ERROR_RESPONSES, to_http_exception
from app.core.exceptions import AppError
from app.dependencies import get_reconciliation_service
from app.schemas.reconciliation import (
    ConflictsResponse,
    ConflictSummary,
    ConflictSummaryRequest,
)
from app.services.reconciliation.reconciliation_service import ReconciliationService
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()


@router.get(
    "/demo",
    response_model=ConflictsResponse,
    status_code=status.HTTP_200_OK,
    summary="Demo conflict view",
    description="Conflict view built from fixed demo records. Touches no storage.",
    operation_id="get_demo_field_conflicts",
)
async def get_demo_conflicts() -> ConflictsResponse:
    """Return the conflict view for the built-in demo records."""
    return ReconciliationService.get_demo_conflicts()


@router.post(
    "/summary",
    response_model=ConflictSummary,
    status_code=status.HTTP_200_OK,
    summary="Summarize conflicts across applications",
    description="Count conflicting columns across many applications.",
    operation_id="summarize_field_conflicts",
)
async def summarize_conflicts(
    request: ConflictSummaryRequest,
    service: Annotated[ReconciliationService, Depends(get_reconciliation_service)],
) -> ConflictSummary:
    """Summarize conflicts for a batch of applications.

    Applications that are missing or fail to load are listed in
    ``failed_applications`` rather than failing the request.
    """
    LOGGER.info(
        "Received conflict summary request",
        extra={"application_count": len(request.application_ids)},
    )
    return await service.summarize(request.application_ids)


@router.get(
    "/{application_id}",
    response_model=ConflictsResponse,
    status_code=status.HTTP_200_OK,
    responses=ERROR_RESPONSES,
    summary="Field conflicts for an application",
    description=(
        "Every value observed for each logical column of the application, "
        "with a conflict flag where the sources disagree."
    ),
    operation_id="get_application_field_conflicts",
)
async def get_conflicts(
    application_id: UUID,
    service: Annotated[ReconciliationService, Depends(get_reconciliation_service)],
) -> ConflictsResponse:
    """Build the per-column conflict view for one application.

    Raises:
        HTTPException: 404 for an unknown application, 503 when storage fails
    """
    LOGGER.info("Received conflicts request", extra={"application_id": str(application_id)})
    try:
        return await service.get_conflicts(application_id)
    except AppError as e:
        raise to_http_exception(e, str(application_id)) from e
