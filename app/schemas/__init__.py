from .common import HealthCheckResponse, ErrorResponse
from .reconciliation import (
    SourceType,
    SourcedValue,
    ColumnConflictRecord,
    CollectionResult,
    ConflictsResponse,
    ConflictSummaryRequest,
    ConflictSummary,
)
from .ocr_insights import (
    DocumentGroup,
    Severity,
    OcrFieldObservation,
    LabelCollision,
    OcrInsightView,
    OcrInsightsResponse,
    OcrGroupsResponse,
    ScoredConflict,
    ConflictReport,
)

__all__ = [
    "HealthCheckResponse",
    "ErrorResponse",
    "SourceType",
    "SourcedValue",
    "ColumnConflictRecord",
    "CollectionResult",
    "ConflictsResponse",
    "ConflictSummaryRequest",
    "ConflictSummary",
    "DocumentGroup",
    "Severity",
    "OcrFieldObservation",
    "LabelCollision",
    "OcrInsightView",
    "OcrInsightsResponse",
    "OcrGroupsResponse",
    "ScoredConflict",
    "ConflictReport",
]
