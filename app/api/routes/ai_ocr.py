"""OCR grouping and conflict report endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.api.routes.errors import ERROR_RESPONSES, to_http_exception
from app.core.exceptions import AppError
from app.dependencies import get_ocr_insights_service
from app.schemas.ocr_insights import ConflictReport, OcrGroupsResponse
from app.services.ocr_insights.ocr_insights_service import OcrInsightsService

router = APIRouter()


@router.get(
    "/{application_id}/groups",
    response_model=OcrGroupsResponse,
    status_code=status.HTTP_200_OK,
    responses=ERROR_RESPONSES,
    summary="OCR fields by document group",
    operation_id="get_application_ocr_groups",
)
async def get_ocr_groups(
    application_id: UUID,
    service: Annotated[OcrInsightsService, Depends(get_ocr_insights_service)],
) -> OcrGroupsResponse:
    try:
        return await service.get_groups(application_id)
    except AppError as e:
        raise to_http_exception(e, str(application_id)) from e


@router.get(
    "/{application_id}/conflicts",
    response_model=ConflictReport,
    status_code=status.HTTP_200_OK,
    responses=ERROR_RESPONSES,
    summary="Severity-scored OCR conflict report",
    description="Labels whose documents disagree, scored by severity with follow-up actions.",
    operation_id="get_application_ocr_conflict_report",
)
async def get_ocr_conflicts(
    application_id: UUID,
    service: Annotated[OcrInsightsService, Depends(get_ocr_insights_service)],
) -> ConflictReport:
    try:
        return await service.get_conflict_report(application_id)
    except AppError as e:
        raise to_http_exception(e, str(application_id)) from e
