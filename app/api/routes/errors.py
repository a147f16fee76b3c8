"""Mapping of service errors onto HTTP errors."""

from fastapi import HTTPException, status

from app.core.exceptions import AppError, ApplicationNotFoundError, DatabaseError
from app.schemas.common import ErrorResponse
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)

ERROR_RESPONSES = {
    404: {"description": "Application not found", "model": ErrorResponse},
    503: {"description": "Storage unavailable", "model": ErrorResponse},
    500: {"description": "Internal server error", "model": ErrorResponse},
}


def to_http_exception(error: AppError, application_id: str) -> HTTPException:
    """Translate a service error into the HTTPException the route raises."""
    if isinstance(error, ApplicationNotFoundError):
        LOGGER.info("Application not found", extra={"application_id": application_id})
        status_code = status.HTTP_404_NOT_FOUND
        message = "Application not found"
    elif isinstance(error, DatabaseError):
        LOGGER.error(
            "Storage unavailable",
            exc_info=True,
            extra={"application_id": application_id, "error": str(error)},
        )
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        message = "Storage is temporarily unavailable"
    else:
        LOGGER.error(
            "Unexpected service error",
            exc_info=True,
            extra={"application_id": application_id, "error": str(error)},
        )
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        message = "Internal server error"

    return HTTPException(
        status_code=status_code,
        detail=ErrorResponse(
            error=type(error).__name__,
            message=message,
            detail=str(error),
        ).model_dump(),
    )
