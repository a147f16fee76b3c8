"""Unit tests for the database-backed field sources."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from app.core.exceptions import SourceUnavailableError
from app.schemas.reconciliation import SourceType
from app.services.reconciliation.sources import (
    BankingFieldSource,
    ClientFormSource,
    OcrFieldSource,
    document_label,
)

PARSED_AT = datetime(2026, 2, 1, tzinfo=timezone.utc)


@pytest.fixture
def session_factory():
    @asynccontextmanager
    async def factory():
        yield MagicMock()

    return factory


def _repository(method: str, return_value):
    repository = MagicMock()
    setattr(repository, method, AsyncMock(return_value=return_value))
    return MagicMock(return_value=repository)


class TestBankingFieldSource:

    @pytest.mark.asyncio
    async def test_maps_header_fields_to_columns(self, session_factory):
        parse = SimpleNamespace(
            id=uuid4(),
            parsed_at=PARSED_AT,
            header_fields={
                "account_holder": "Acme Ltd",
                "address": "1 Main St",
                "closing_balance": 1200.5,
                "transactions": [{"amount": 1}],
            },
        )
        repository = _repository("list_by_application", [parse])

        with patch("app.services.reconciliation.sources.BankStatementRepository", repository):
            values = await BankingFieldSource(session_factory).fetch(uuid4())

        assert [(v.column, v.value) for v in values] == [
            ("req_legal_business_name", "Acme Ltd"),
            ("req_business_address", "1 Main St"),
            ("bank_closing_balance", 1200.5),
        ]
        assert all(v.source_type == SourceType.BANKING for v in values)
        assert values[0].label == "Bank Statement"
        assert values[0].source_id == str(parse.id)


class TestClientFormSource:

    @pytest.mark.asyncio
    async def test_emits_form_fields(self, session_factory):
        application_id = uuid4()
        repository = _repository(
            "get_form_snapshot",
            ({"req_business_address": "1 Main St", "owners": ["a"]}, PARSED_AT),
        )

        with patch("app.services.reconciliation.sources.ApplicationRepository", repository):
            values = await ClientFormSource(session_factory).fetch(application_id)

        assert len(values) == 1
        assert values[0].column == "req_business_address"
        assert values[0].source_id == str(application_id)
        assert values[0].observed_at == PARSED_AT

    @pytest.mark.asyncio
    async def test_missing_snapshot(self, session_factory):
        repository = _repository("get_form_snapshot", None)

        with patch("app.services.reconciliation.sources.ApplicationRepository", repository):
            assert await ClientFormSource(session_factory).fetch(uuid4()) == []


class TestOcrFieldSource:

    @pytest.mark.asyncio
    async def test_only_mapped_fields_are_emitted(self, session_factory):
        document = SimpleNamespace(id=uuid4(), document_type="income_statement", file_name="is.pdf")
        rows = [
            (SimpleNamespace(column_key="income_statement_net_income", value="125,000",
                             confidence=Decimal("0.9200"), extracted_at=PARSED_AT), document),
            (SimpleNamespace(column_key=None, value="x", confidence=None, extracted_at=PARSED_AT), document),
        ]
        repository = _repository("list_fields_by_application", rows)

        with patch("app.services.reconciliation.sources.DocumentRepository", repository):
            values = await OcrFieldSource(session_factory).fetch(uuid4())

        assert len(values) == 1
        assert values[0].label == "Income Statement"
        assert values[0].confidence == 0.92
        assert values[0].source_type == SourceType.OCR

    @pytest.mark.asyncio
    async def test_percentage_confidence_is_scaled(self, session_factory):
        document = SimpleNamespace(id=uuid4(), document_type="tax_returns", file_name="t1.pdf")
        rows = [
            (SimpleNamespace(id=uuid4(), column_key="req_sin", value="123-456-789",
                             confidence=Decimal("95"), extracted_at=PARSED_AT), document),
        ]
        repository = _repository("list_fields_by_application", rows)

        with patch("app.services.reconciliation.sources.DocumentRepository", repository):
            values = await OcrFieldSource(session_factory).fetch(uuid4())

        assert values[0].confidence == 0.95

    @pytest.mark.asyncio
    async def test_unreadable_rows_do_not_fail_the_source(self, session_factory):
        document = SimpleNamespace(id=uuid4(), document_type="tax_returns", file_name="t1.pdf")
        rows = [
            (SimpleNamespace(id=uuid4(), column_key="req_sin", value="123-456-789",
                             confidence=None, extracted_at="not a timestamp"), document),
            (SimpleNamespace(id=uuid4(), column_key="req_legal_business_name", value="Acme Ltd",
                             confidence=Decimal("0.8"), extracted_at=PARSED_AT), document),
        ]
        repository = _repository("list_fields_by_application", rows)

        with patch("app.services.reconciliation.sources.DocumentRepository", repository):
            values = await OcrFieldSource(session_factory).fetch(uuid4())

        assert [v.column for v in values] == ["req_legal_business_name"]


class TestDocumentLabel:

    def test_document_type_is_titled(self):
        assert document_label("income_statement", "x.pdf") == "Income Statement"

    def test_falls_back_to_file_name(self):
        assert document_label(None, "x.pdf") == "x.pdf"
        assert document_label(None, None) == "Document"


class TestSourceFailures:

    @pytest.mark.asyncio
    async def test_storage_errors_become_source_unavailable(self, session_factory):
        repository = MagicMock()
        repository.list_fields_by_application = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("down"))
        )

        with patch(
            "app.services.reconciliation.sources.DocumentRepository",
            MagicMock(return_value=repository),
        ):
            with pytest.raises(SourceUnavailableError) as exc_info:
                await OcrFieldSource(session_factory).fetch(uuid4())

        assert exc_info.value.source_type == "ocr"
