"""Field sources backed by the database.

Each source opens its own session per fetch so the collector can query them
concurrently without sharing a connection.
"""

from decimal import Decimal
from typing import Any, List
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import SourceUnavailableError
from app.repositories.application_repository import ApplicationRepository
from app.repositories.bank_statement_repository import BankStatementRepository
from app.repositories.document_repository import DocumentRepository
from app.schemas.reconciliation import SourcedValue, SourceType
from app.services.reconciliation.constants import (
    BANKING_COLUMN_PREFIX,
    BANKING_HEADER_COLUMNS,
    SOURCE_LABELS,
)
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


def _unavailable(source_type: SourceType, application_id: UUID, error: Exception) -> SourceUnavailableError:
    return SourceUnavailableError(
        f"{source_type.value} source unavailable for application {application_id}",
        source_type=source_type.value,
        original_error=error,
    )


def _is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, float, Decimal))


def document_label(document_type: str | None, file_name: str | None) -> str:
    """Display name of a document source ("income_statement" -> "Income Statement")."""
    if document_type:
        return document_type.replace("_", " ").strip().title()
    return file_name or "Document"


class BankingFieldSource:
    """Header fields parsed from the application's bank statements."""

    source_type = SourceType.BANKING

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def fetch(self, application_id: UUID) -> List[SourcedValue]:
        try:
            async with self.session_factory() as session:
                parses = await BankStatementRepository(session).list_by_application(application_id)
        except SQLAlchemyError as e:
            raise _unavailable(self.source_type, application_id, e) from e

        values = []
        for parse in parses:
            for key, value in (parse.header_fields or {}).items():
                if not _is_scalar(value):
                    continue
                values.append(
                    SourcedValue(
                        column=BANKING_HEADER_COLUMNS.get(key, f"{BANKING_COLUMN_PREFIX}{key}"),
                        value=value,
                        source_type=self.source_type,
                        source_id=str(parse.id),
                        label=SOURCE_LABELS["banking"],
                        observed_at=parse.parsed_at,
                    )
                )
        return values


class ClientFormSource:
    """Fields from the client's current application form."""

    source_type = SourceType.CLIENT

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def fetch(self, application_id: UUID) -> List[SourcedValue]:
        try:
            async with self.session_factory() as session:
                snapshot = await ApplicationRepository(session).get_form_snapshot(application_id)
        except SQLAlchemyError as e:
            raise _unavailable(self.source_type, application_id, e) from e

        if snapshot is None:
            return []

        form_data, updated_at = snapshot
        return [
            SourcedValue(
                column=column,
                value=value,
                source_type=self.source_type,
                source_id=str(application_id),
                label=SOURCE_LABELS["client"],
                observed_at=updated_at,
            )
            for column, value in form_data.items()
            if _is_scalar(value)
        ]


class OcrFieldSource:
    """Structured OCR fields that map onto a logical column."""

    source_type = SourceType.OCR

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def fetch(self, application_id: UUID) -> List[SourcedValue]:
        try:
            async with self.session_factory() as session:
                rows = await DocumentRepository(session).list_fields_by_application(application_id)
        except SQLAlchemyError as e:
            raise _unavailable(self.source_type, application_id, e) from e

        values = []
        for field, document in rows:
            if not field.column_key:
                continue
            try:
                values.append(
                    SourcedValue(
                        column=field.column_key,
                        value=field.value,
                        source_type=self.source_type,
                        source_id=str(document.id),
                        label=document_label(document.document_type, document.file_name),
                        observed_at=field.extracted_at,
                        confidence=field.confidence,
                    )
                )
            except PydanticValidationError as e:
                LOGGER.debug(
                    "Skipping unreadable OCR field",
                    extra={"field_id": str(field.id), "error_count": e.error_count()},
                )
        return values
