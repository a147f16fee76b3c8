"""Shared API response models."""

from typing import Optional

from pydantic import BaseModel, Field


class HealthCheckResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Service status
        version: Application version
        service: Service name
        database: Database connectivity status
    """

    status: str = Field(
        default="healthy",
        description="Service health status",
        examples=["healthy", "degraded"],
    )
    version: str = Field(..., description="Application version", examples=["0.1.0"])
    service: str = Field(
        ...,
        description="Service name",
        examples=["Loan Field Reconciliation Service"],
    )
    database: Optional[str] = Field(
        default=None,
        description="Database connectivity status",
        examples=["healthy", "unhealthy"],
    )


class ErrorResponse(BaseModel):
    """Error response model.

    Attributes:
        error: Error type/category
        message: Human-readable error message
        detail: Optional detailed error information
    """

    error: str = Field(
        ...,
        description="Error type or category",
        examples=["ApplicationNotFoundError", "DatabaseError"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Application not found"],
    )
    detail: Optional[str] = Field(default=None, description="Detailed error information")
