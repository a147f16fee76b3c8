"""Reconciliation service: collector plus conflict engine, per application or in bulk."""

from typing import List, Optional
from uuid import UUID

from app.core.exceptions import ApplicationNotFoundError, AppError
from app.schemas.ocr_insights import Severity
from app.schemas.reconciliation import ConflictsResponse, ConflictSummary
from app.services.reconciliation.conflict_engine import build_conflicts
from app.services.reconciliation.demo_data import DEMO_RECORDS
from app.services.reconciliation.severity import ConflictSeverityScorer, mean_confidence
from app.services.reconciliation.value_collector import ValueCollector
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class ReconciliationService:
    """Builds the per-column conflict view for applications."""

    def __init__(
        self,
        collector: ValueCollector,
        scorer: Optional[ConflictSeverityScorer] = None,
    ):
        self.collector = collector
        self.scorer = scorer or ConflictSeverityScorer()

    async def get_conflicts(self, application_id: UUID) -> ConflictsResponse:
        """Collect and reconcile every sourced value for one application.

        Raises:
            ApplicationNotFoundError: If the application does not exist
            DatabaseError: If the existence check fails
        """
        result = await self.collector.collect_sourced_values(application_id)
        if not result.application_found:
            raise ApplicationNotFoundError(f"Application {application_id} not found")

        return ConflictsResponse(
            application_id=application_id,
            columns=build_conflicts(result.values),
            failed_sources=result.failed_sources,
        )

    @staticmethod
    def get_demo_conflicts() -> ConflictsResponse:
        """Run the fixed demo records through the conflict engine."""
        return ConflictsResponse(columns=build_conflicts(DEMO_RECORDS))

    async def summarize(self, application_ids: List[UUID]) -> ConflictSummary:
        """Count conflicts across many applications.

        Applications that are missing or fail to load are listed in
        ``failed_applications`` and otherwise skipped.
        """
        summary = ConflictSummary(total_applications=len(application_ids))

        for application_id in application_ids:
            try:
                response = await self.get_conflicts(application_id)
            except AppError as e:
                LOGGER.warning(
                    "Skipping application in conflict summary",
                    extra={"application_id": str(application_id), "error": str(e)},
                )
                summary.failed_applications.append(application_id)
                continue

            conflicting = {
                column: record
                for column, record in response.columns.items()
                if record.conflict
            }
            if not conflicting:
                continue

            summary.applications_with_conflicts += 1
            summary.total_conflicts += len(conflicting)
            for column, record in conflicting.items():
                summary.conflicts_by_column[column] = summary.conflicts_by_column.get(column, 0) + 1
                confidence = mean_confidence(value.confidence for value in record.values)
                if self.scorer.severity_for(column, confidence) == Severity.CRITICAL:
                    summary.critical_conflicts += 1

        LOGGER.info(
            "Summarized conflicts",
            extra={
                "total_applications": summary.total_applications,
                "applications_with_conflicts": summary.applications_with_conflicts,
                "total_conflicts": summary.total_conflicts,
            },
        )
        return summary
