"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone
from typing import List

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.schemas.ocr_insights import OcrFieldObservation
from app.schemas.reconciliation import SourcedValue, SourceType


@pytest.fixture
def test_client() -> TestClient:
    """Create FastAPI test client.

    Returns:
        TestClient: FastAPI test client instance
    """
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_dependency_overrides():
    """Ensure FastAPI dependency overrides are reset between tests."""
    app.dependency_overrides = {}
    yield
    app.dependency_overrides = {}


@pytest.fixture
def observed_at() -> datetime:
    return datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def address_records(observed_at: datetime) -> List[SourcedValue]:
    """Bank statement and client form disagreeing on the business address."""
    return [
        SourcedValue(
            column="req_business_address",
            value="1234 Jasper Ave, Suite 900",
            source_type=SourceType.BANKING,
            source_id="stmt-1",
            label="Bank Statement",
            observed_at=observed_at,
        ),
        SourcedValue(
            column="req_business_address",
            value="1234 Jasper Avenue, Ste 900",
            source_type=SourceType.CLIENT,
            source_id="app-1",
            label="Client Application",
            observed_at=observed_at,
        ),
    ]


@pytest.fixture
def sin_observations() -> List[OcrFieldObservation]:
    """The same SIN reported by a tax return and a contract."""
    return [
        OcrFieldObservation(
            doc_id="doc-tax",
            group="Taxes",
            label="SIN",
            value="123-456-789",
            confidence=0.95,
            source_name="t1_2025.pdf",
        ),
        OcrFieldObservation(
            doc_id="doc-contract",
            group="Contracts",
            label="SIN",
            value="123-456-789",
            confidence=0.9,
            source_name="lease.pdf",
        ),
    ]
