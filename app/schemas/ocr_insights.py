"""OCR insight schemas: grouped document fields and cross-document label collisions."""

from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.reconciliation import coerce_observed_value, normalize_confidence


class DocumentGroup(str, Enum):
    """Semantic bucket a document's fields are displayed under."""
    BALANCE_SHEET_DATA = "Balance Sheet Data"
    INCOME_STATEMENT = "Income Statement"
    CASH_FLOW_STATEMENTS = "Cash Flow Statements"
    TAXES = "Taxes"
    CONTRACTS = "Contracts"
    INVOICES = "Invoices"
    OTHER = "Other"


class Severity(str, Enum):
    """Severity of a value conflict."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class OcrFieldObservation(BaseModel):
    """One field extracted from one document."""

    model_config = ConfigDict(frozen=True)

    doc_id: str = Field(..., description="Source document identifier")
    group: str = Field(
        DocumentGroup.OTHER.value,
        description="Semantic bucket, open-ended",
        examples=["Taxes", "Contracts"],
    )
    label: str = Field(..., description="Field name within the document", examples=["SIN"])
    value: str = Field("", description="Extracted value as a display string")
    confidence: Optional[float] = Field(None, ge=0.0, le=1.0)
    source_name: Optional[str] = Field(None, description="Document file name")

    @field_validator("doc_id", "label", mode="before")
    @classmethod
    def validate_text_fields(cls, v: Any) -> Any:
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("group", mode="before")
    @classmethod
    def validate_group(cls, v: Any) -> str:
        if v is None or not str(v).strip():
            return DocumentGroup.OTHER.value
        return v.value if isinstance(v, Enum) else str(v)

    @field_validator("value", mode="before")
    @classmethod
    def validate_value(cls, v: Any) -> str:
        """Display string of the extracted value; None becomes empty."""
        v = coerce_observed_value(v)
        return "" if v is None else str(v)

    @field_validator("confidence", mode="before")
    @classmethod
    def validate_confidence(cls, v: Any) -> Optional[float]:
        return normalize_confidence(v)


class LabelCollision(BaseModel):
    """A field label reported by two or more different documents."""

    label: str
    doc_ids: List[str] = Field(default_factory=list)
    groups: List[str] = Field(default_factory=list)
    observations: List[OcrFieldObservation] = Field(default_factory=list)
    conflict: bool = Field(False, description="Documents disagree on the value")
    cross_group: bool = Field(
        False, description="The label appears under more than one document group"
    )
    near_duplicate: bool = False


class OcrInsightView(BaseModel):
    """Grouped OCR fields plus the cross-document collision index."""

    groups: Dict[str, List[OcrFieldObservation]] = Field(default_factory=dict)
    collisions: Dict[str, LabelCollision] = Field(default_factory=dict)
    unmatched_documents: List[str] = Field(
        default_factory=list, description="Documents that produced no fields"
    )


class OcrInsightsResponse(OcrInsightView):
    """Response payload for the OCR insights endpoint."""

    ok: bool = True
    application_id: UUID


class OcrGroupsResponse(BaseModel):
    """Response payload for the OCR field groupings endpoint."""

    ok: bool = True
    application_id: UUID
    groups: Dict[str, List[OcrFieldObservation]] = Field(default_factory=dict)


class ScoredConflict(BaseModel):
    """A conflicting field with its severity and recommended follow-up."""

    field_name: str
    conflicting_values: List[OcrFieldObservation] = Field(default_factory=list)
    severity: Severity
    recommendation: str
    mean_confidence: Optional[float] = None


class ConflictReport(BaseModel):
    """Severity-scored conflicts for one application."""

    ok: bool = True
    application_id: Optional[UUID] = None
    total_conflicts: int = 0
    critical_conflicts: int = 0
    overall_risk: Severity = Severity.LOW
    conflicts: List[ScoredConflict] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
