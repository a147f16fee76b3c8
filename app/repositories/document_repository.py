from typing import Dict, List, Sequence, Tuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.models import Document, DocumentField, OCRResult
from app.repositories.base_repository import BaseRepository
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class DocumentRepository(BaseRepository[Document]):
    """Repository for application documents and their OCR output.

    Inherits from BaseRepository for standard read operations.
    """

    def __init__(self, session: AsyncSession):
        """Initialize document repository.

        Args:
            session: SQLAlchemy async session
        """
        super().__init__(session, Document)

    async def list_by_application(self, application_id: UUID) -> List[Document]:
        """Fetch an application's documents in upload order.

        Args:
            application_id: Application ID

        Returns:
            List of Document records
        """
        try:
            query = (
                select(Document)
                .where(Document.application_id == application_id)
                .order_by(Document.uploaded_at, Document.id)
            )
            result = await self.session.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            LOGGER.error(
                "Failed to list documents",
                exc_info=True,
                extra={"application_id": str(application_id), "error": str(e)}
            )
            raise

    async def list_fields_by_application(
        self,
        application_id: UUID
    ) -> List[Tuple[DocumentField, Document]]:
        """Fetch structured OCR fields with their document.

        Ordered by document upload time, then by the field's position within
        its document, so each document's fields keep extraction order.

        Args:
            application_id: Application ID

        Returns:
            List of (DocumentField, Document) pairs
        """
        try:
            query = (
                select(DocumentField, Document)
                .join(Document, DocumentField.document_id == Document.id)
                .where(Document.application_id == application_id)
                .order_by(
                    Document.uploaded_at,
                    Document.id,
                    DocumentField.position,
                    DocumentField.extracted_at,
                )
            )
            result = await self.session.execute(query)
            return [(row[0], row[1]) for row in result.all()]
        except SQLAlchemyError as e:
            LOGGER.error(
                "Failed to list document fields",
                exc_info=True,
                extra={"application_id": str(application_id), "error": str(e)}
            )
            raise

    async def get_ocr_texts(self, document_ids: Sequence[UUID]) -> Dict[UUID, str]:
        """Fetch the most recent non-empty OCR text for each document.

        Args:
            document_ids: Document IDs

        Returns:
            Mapping of document ID to OCR text; documents without text are absent
        """
        if not document_ids:
            return {}

        try:
            query = (
                select(OCRResult.document_id, OCRResult.extracted_text)
                .where(OCRResult.document_id.in_(list(document_ids)))
                .where(OCRResult.extracted_text.is_not(None))
                .order_by(OCRResult.created_at.desc())
            )
            result = await self.session.execute(query)
        except SQLAlchemyError as e:
            LOGGER.error(
                "Failed to fetch OCR text",
                exc_info=True,
                extra={"document_count": len(document_ids), "error": str(e)}
            )
            raise

        texts: Dict[UUID, str] = {}
        for document_id, text in result.all():
            if document_id not in texts and text and text.strip():
                texts[document_id] = text
        return texts
