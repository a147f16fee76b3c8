"""OCR insights API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.routes.errors import ERROR_RESPONSES, to_http_exception
from app.core.exceptions import AppError
from app.dependencies import get_ocr_insights_service
from app.schemas.ocr_insights import OcrInsightsResponse
from app.services.ocr_insights.ocr_insights_service import OcrInsightsService
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()


@router.get(
    "/insights",
    response_model=OcrInsightsResponse,
    status_code=status.HTTP_200_OK,
    responses=ERROR_RESPONSES,
    summary="Grouped OCR insights",
    description=(
        "Document fields grouped by document category, labels shared by more "
        "than one document, and documents that yielded no fields."
    ),
    operation_id="get_application_ocr_insights",
)
async def get_ocr_insights(
    service: Annotated[OcrInsightsService, Depends(get_ocr_insights_service)],
    application_id: UUID = Query(..., alias="appId", description="Application ID"),
) -> OcrInsightsResponse:
    """Build the grouped OCR view for one application."""
    LOGGER.info("Received OCR insights request", extra={"application_id": str(application_id)})
    try:
        return await service.get_insights(application_id)
    except AppError as e:
        raise to_http_exception(e, str(application_id)) from e
