"""OCR insights service.

Loads an application's document field observations and runs them through
the view builder. Documents with OCR text but no structured field rows are
run through the text field extractor when enabled.
"""

from typing import List, Optional, Tuple
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import ApplicationNotFoundError, DatabaseError
from app.repositories.application_repository import ApplicationRepository
from app.repositories.document_repository import DocumentRepository
from app.schemas.ocr_insights import (
    ConflictReport,
    OcrFieldObservation,
    OcrGroupsResponse,
    OcrInsightsResponse,
)
from app.services.ocr_insights.field_extractor import FieldExtractor, categorize_document
from app.services.ocr_insights.view_builder import build_ocr_view
from app.services.reconciliation.severity import ConflictSeverityScorer
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class OcrInsightsService:
    """Grouped OCR insights for one application.

    Attributes:
        application_repo: Application existence checks
        document_repo: Documents, field rows and OCR text
        extractor: Text field extractor for documents without field rows
        scorer: Severity scorer for the conflict report
    """

    def __init__(
        self,
        session: AsyncSession,
        extractor: Optional[FieldExtractor] = None,
        scorer: Optional[ConflictSeverityScorer] = None,
        enable_text_extraction: Optional[bool] = None,
    ):
        """Initialize OCR insights service.

        Args:
            session: Database session
            extractor: Text field extractor
            scorer: Severity scorer
            enable_text_extraction: Extract from OCR text; defaults to settings
        """
        self.application_repo = ApplicationRepository(session)
        self.document_repo = DocumentRepository(session)
        self.extractor = extractor or FieldExtractor(
            max_value_length=settings.max_extracted_value_length
        )
        self.scorer = scorer or ConflictSeverityScorer()
        self.enable_text_extraction = (
            settings.enable_ocr_text_extraction
            if enable_text_extraction is None
            else enable_text_extraction
        )

    async def load_observations(
        self,
        application_id: UUID,
    ) -> Tuple[List[OcrFieldObservation], List[str]]:
        """Load field observations for every document of an application.

        Args:
            application_id: Application ID

        Returns:
            (observations in document upload order, file names of documents
            that produced no fields)

        Raises:
            ApplicationNotFoundError: If the application does not exist
            DatabaseError: If the database cannot be read
        """
        try:
            if not await self.application_repo.exists(application_id):
                raise ApplicationNotFoundError(f"Application {application_id} not found")

            documents = await self.document_repo.list_by_application(application_id)
            field_rows = await self.document_repo.list_fields_by_application(application_id)

            with_fields = {document.id for _, document in field_rows}
            needs_text = [d.id for d in documents if d.id not in with_fields]
            texts = (
                await self.document_repo.get_ocr_texts(needs_text)
                if self.enable_text_extraction and needs_text
                else {}
            )
        except SQLAlchemyError as e:
            raise DatabaseError(
                f"Failed to load OCR observations for application {application_id}",
                original_error=e,
            ) from e

        fields_by_document = {}
        for field, document in field_rows:
            document_fields = fields_by_document.setdefault(document.id, [])
            try:
                document_fields.append(
                    OcrFieldObservation(
                        doc_id=str(document.id),
                        group=categorize_document(document.document_type),
                        label=field.label,
                        value=field.value,
                        confidence=field.confidence,
                        source_name=document.file_name,
                    )
                )
            except PydanticValidationError as e:
                LOGGER.debug(
                    "Skipping unreadable OCR field",
                    extra={"document_id": str(document.id), "error_count": e.error_count()},
                )

        observations: List[OcrFieldObservation] = []
        unmatched: List[str] = []
        for document in documents:
            document_fields = fields_by_document.get(document.id)
            if document_fields is None and document.id in texts:
                document_fields = self.extractor.extract(
                    texts[document.id],
                    doc_id=str(document.id),
                    group=categorize_document(document.document_type),
                    source_name=document.file_name,
                )
            if not document_fields:
                unmatched.append(document.file_name)
                continue
            observations.extend(document_fields)

        LOGGER.info(
            "Loaded OCR observations",
            extra={
                "application_id": str(application_id),
                "document_count": len(documents),
                "observation_count": len(observations),
                "unmatched_count": len(unmatched),
            },
        )
        return observations, unmatched

    async def get_insights(self, application_id: UUID) -> OcrInsightsResponse:
        """Grouped fields, label collisions and unmatched documents."""
        observations, unmatched = await self.load_observations(application_id)
        view = build_ocr_view(observations, unmatched_documents=unmatched)
        return OcrInsightsResponse(
            application_id=application_id,
            groups=view.groups,
            collisions=view.collisions,
            unmatched_documents=view.unmatched_documents,
        )

    async def get_groups(self, application_id: UUID) -> OcrGroupsResponse:
        """Fields grouped by document group."""
        observations, unmatched = await self.load_observations(application_id)
        view = build_ocr_view(observations, unmatched_documents=unmatched)
        return OcrGroupsResponse(application_id=application_id, groups=view.groups)

    async def get_conflict_report(self, application_id: UUID) -> ConflictReport:
        """Severity-scored report of labels the documents disagree on."""
        observations, unmatched = await self.load_observations(application_id)
        view = build_ocr_view(observations, unmatched_documents=unmatched)
        report = self.scorer.build_report(view.collisions, application_id=application_id)

        LOGGER.info(
            "Built OCR conflict report",
            extra={
                "application_id": str(application_id),
                "total_conflicts": report.total_conflicts,
                "overall_risk": report.overall_risk.value,
            },
        )
        return report
