"""
Field reconciliation schemas.

A ``SourcedValue`` is one historical observation of one logical business
field (a "column") from one source. The conflict engine folds a flat list of
them into one ``ColumnConflictRecord`` per column.
"""

import json
import math
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator


# StrictBool comes first so True is kept as a bool instead of becoming 1
ObservedValue = Union[StrictBool, int, float, Decimal, str, None]

UNKNOWN_SOURCE_LABEL = "Unknown source"


class SourceType(str, Enum):
    """Provenance category of a sourced value."""
    BANKING = "banking"
    CLIENT = "client"
    OCR = "ocr"
    DOCUMENT = "document"
    FORM = "form"


def normalize_confidence(value: Any) -> Optional[float]:
    """Confidence on a 0-1 scale, or None when it cannot be read.

    Upstream OCR engines report either a 0-1 fraction or a 0-100 percentage;
    values above 1 are read as percentages.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(confidence) or confidence < 0:
        return None
    if confidence > 1:
        return confidence / 100.0 if confidence <= 100 else None
    return confidence


def coerce_observed_value(value: Any) -> Any:
    """Render values of unsupported types (lists, dicts, ...) as strings."""
    if value is None or isinstance(value, (bool, int, float, Decimal, str)):
        return value
    if isinstance(value, (list, dict, tuple)):
        return json.dumps(value, sort_keys=True, default=str)
    return str(value)


class SourcedValue(BaseModel):
    """One observation of one field from one source. Never mutated.

    Only ``column`` is required. Source types outside ``SourceType`` are kept
    as plain strings, since new providers can be registered without a
    release.
    """

    model_config = ConfigDict(frozen=True)

    column: str = Field(
        ...,
        description="Logical business field identifier",
        examples=["req_business_address", "income_statement_net_income"],
    )
    value: ObservedValue = Field(None, description="Observed value as captured")
    source_type: Union[SourceType, str] = Field(
        "unknown",
        union_mode="left_to_right",
        description="Provenance category; unrecognized categories are kept as given",
    )
    source_id: Optional[str] = Field(
        None, description="Identifier of the concrete source record"
    )
    label: str = Field(
        UNKNOWN_SOURCE_LABEL,
        description="Human-readable source name",
        examples=["Bank Statement"],
    )
    observed_at: Optional[datetime] = None
    confidence: Optional[float] = Field(
        None, ge=0.0, le=1.0, description="Extraction confidence for OCR-derived values"
    )

    @field_validator("value", mode="before")
    @classmethod
    def validate_value(cls, v: Any) -> Any:
        return coerce_observed_value(v)

    @field_validator("source_type", "source_id", mode="before")
    @classmethod
    def validate_identifiers(cls, v: Any) -> Any:
        """Accept numeric identifiers and categories from loosely typed stores."""
        if v is None or isinstance(v, (str, Enum)):
            return v
        return str(v)

    @field_validator("label", mode="before")
    @classmethod
    def validate_label(cls, v: Any) -> str:
        if v is None or not str(v).strip():
            return UNKNOWN_SOURCE_LABEL
        return str(v)

    @field_validator("confidence", mode="before")
    @classmethod
    def validate_confidence(cls, v: Any) -> Optional[float]:
        return normalize_confidence(v)


class ColumnConflictRecord(BaseModel):
    """Reconciled view of one column across every source that reported it."""

    conflict: bool = Field(
        ..., description="True iff two or more distinct normalized values were observed"
    )
    values: List[SourcedValue] = Field(
        default_factory=list, description="Contributing observations in collection order"
    )
    distinct_values: List[str] = Field(
        default_factory=list,
        description="Display form of each distinct normalized value, first-seen order",
    )
    near_duplicate: bool = Field(
        False,
        description="Conflicting text values that are all highly similar (likely spelling variants)",
    )


class CollectionResult(BaseModel):
    """Snapshot of every sourced value for an application."""

    application_found: bool = True
    values: List[SourcedValue] = Field(default_factory=list)
    failed_sources: List[SourceType] = Field(
        default_factory=list,
        description="Sources that errored or timed out and contributed nothing",
    )


class ConflictsResponse(BaseModel):
    """Response payload for the per-application conflict view."""

    ok: bool = True
    application_id: Optional[UUID] = None
    columns: Dict[str, ColumnConflictRecord] = Field(default_factory=dict)
    failed_sources: List[SourceType] = Field(default_factory=list)


class ConflictSummaryRequest(BaseModel):
    """Request payload for summarizing conflicts over many applications."""

    application_ids: List[UUID] = Field(..., min_length=1, max_length=500)


class ConflictSummary(BaseModel):
    """Conflict totals across a batch of applications."""

    total_applications: int = 0
    applications_with_conflicts: int = 0
    total_conflicts: int = 0
    critical_conflicts: int = 0
    conflicts_by_column: Dict[str, int] = Field(default_factory=dict)
    failed_applications: List[UUID] = Field(default_factory=list)
