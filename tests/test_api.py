"""Tests for API endpoints."""

from unittest.mock import AsyncMock, patch
from uuid import uuid4

from fastapi.testclient import TestClient

from app.core.exceptions import ApplicationNotFoundError, DatabaseError
from app.dependencies import get_ocr_insights_service, get_reconciliation_service
from app.main import app
from app.schemas.ocr_insights import (
    ConflictReport,
    OcrGroupsResponse,
    OcrInsightsResponse,
    Severity,
)
from app.schemas.reconciliation import (
    ConflictsResponse,
    ConflictSummary,
    SourceType,
)
from app.services.reconciliation.conflict_engine import build_conflicts


class TestConflictEndpoints:
    """Test suite for the field conflict endpoints."""

    def test_demo_conflicts(self, test_client: TestClient) -> None:
        """Demo endpoint needs no storage and is not shadowed by the id route."""
        response = test_client.get("/api/conflicts/demo")

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["columns"]["req_business_address"]["conflict"] is True
        assert data["columns"]["req_business_address"]["near_duplicate"] is True
        assert data["columns"]["income_statement_net_income"]["conflict"] is True
        assert data["columns"]["req_legal_business_name"]["conflict"] is False

    def test_get_conflicts(self, test_client: TestClient, address_records) -> None:
        application_id = uuid4()
        mock_service = AsyncMock()
        mock_service.get_conflicts.return_value = ConflictsResponse(
            application_id=application_id,
            columns=build_conflicts(address_records),
            failed_sources=[SourceType.OCR],
        )
        app.dependency_overrides[get_reconciliation_service] = lambda: mock_service

        response = test_client.get(f"/api/conflicts/{application_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["application_id"] == str(application_id)
        record = data["columns"]["req_business_address"]
        assert record["conflict"] is True
        assert [v["source_type"] for v in record["values"]] == ["banking", "client"]
        assert data["failed_sources"] == ["ocr"]
        mock_service.get_conflicts.assert_awaited_once_with(application_id)

    def test_get_conflicts_empty_application(self, test_client: TestClient) -> None:
        mock_service = AsyncMock()
        mock_service.get_conflicts.return_value = ConflictsResponse(application_id=uuid4())
        app.dependency_overrides[get_reconciliation_service] = lambda: mock_service

        response = test_client.get(f"/api/conflicts/{uuid4()}")

        assert response.status_code == 200
        assert response.json()["columns"] == {}

    def test_get_conflicts_not_found(self, test_client: TestClient) -> None:
        mock_service = AsyncMock()
        mock_service.get_conflicts.side_effect = ApplicationNotFoundError("missing")
        app.dependency_overrides[get_reconciliation_service] = lambda: mock_service

        response = test_client.get(f"/api/conflicts/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "ApplicationNotFoundError"

    def test_get_conflicts_storage_down(self, test_client: TestClient) -> None:
        mock_service = AsyncMock()
        mock_service.get_conflicts.side_effect = DatabaseError("down")
        app.dependency_overrides[get_reconciliation_service] = lambda: mock_service

        response = test_client.get(f"/api/conflicts/{uuid4()}")

        assert response.status_code == 503
        assert response.json()["detail"]["error"] == "DatabaseError"

    def test_get_conflicts_invalid_id(self, test_client: TestClient) -> None:
        app.dependency_overrides[get_reconciliation_service] = lambda: AsyncMock()

        response = test_client.get("/api/conflicts/not-a-uuid")

        assert response.status_code == 422

    def test_summary(self, test_client: TestClient) -> None:
        ids = [uuid4(), uuid4()]
        mock_service = AsyncMock()
        mock_service.summarize.return_value = ConflictSummary(
            total_applications=2,
            applications_with_conflicts=1,
            total_conflicts=1,
            conflicts_by_column={"req_business_address": 1},
        )
        app.dependency_overrides[get_reconciliation_service] = lambda: mock_service

        response = test_client.post(
            "/api/conflicts/summary",
            json={"application_ids": [str(i) for i in ids]},
        )

        assert response.status_code == 200
        assert response.json()["conflicts_by_column"] == {"req_business_address": 1}
        mock_service.summarize.assert_awaited_once_with(ids)

    def test_summary_requires_ids(self, test_client: TestClient) -> None:
        app.dependency_overrides[get_reconciliation_service] = lambda: AsyncMock()

        response = test_client.post("/api/conflicts/summary", json={"application_ids": []})

        assert response.status_code == 422


class TestOcrEndpoints:
    """Test suite for the OCR insight endpoints."""

    def test_insights(self, test_client: TestClient) -> None:
        application_id = uuid4()
        mock_service = AsyncMock()
        mock_service.get_insights.return_value = OcrInsightsResponse(
            application_id=application_id,
            unmatched_documents=["scan.pdf"],
        )
        app.dependency_overrides[get_ocr_insights_service] = lambda: mock_service

        response = test_client.get("/api/ocr/insights", params={"appId": str(application_id)})

        assert response.status_code == 200
        assert response.json()["unmatched_documents"] == ["scan.pdf"]
        mock_service.get_insights.assert_awaited_once_with(application_id)

    def test_insights_requires_app_id(self, test_client: TestClient) -> None:
        mock_service = AsyncMock()
        app.dependency_overrides[get_ocr_insights_service] = lambda: mock_service

        response = test_client.get("/api/ocr/insights")

        assert response.status_code == 422

    def test_groups(self, test_client: TestClient) -> None:
        application_id = uuid4()
        mock_service = AsyncMock()
        mock_service.get_groups.return_value = OcrGroupsResponse(application_id=application_id)
        app.dependency_overrides[get_ocr_insights_service] = lambda: mock_service

        response = test_client.get(f"/api/ai/ocr/{application_id}/groups")

        assert response.status_code == 200
        assert response.json()["groups"] == {}

    def test_conflict_report(self, test_client: TestClient) -> None:
        application_id = uuid4()
        mock_service = AsyncMock()
        mock_service.get_conflict_report.return_value = ConflictReport(
            application_id=application_id,
            overall_risk=Severity.LOW,
            recommendations=["No significant field conflicts detected"],
        )
        app.dependency_overrides[get_ocr_insights_service] = lambda: mock_service

        response = test_client.get(f"/api/ai/ocr/{application_id}/conflicts")

        assert response.status_code == 200
        assert response.json()["overall_risk"] == "low"

    def test_conflict_report_not_found(self, test_client: TestClient) -> None:
        mock_service = AsyncMock()
        mock_service.get_conflict_report.side_effect = ApplicationNotFoundError("missing")
        app.dependency_overrides[get_ocr_insights_service] = lambda: mock_service

        response = test_client.get(f"/api/ai/ocr/{uuid4()}/conflicts")

        assert response.status_code == 404


class TestHealthEndpoints:

    def test_health_degraded_when_database_down(self, test_client: TestClient) -> None:
        with patch(
            "app.api.routes.health.db_client.health_check",
            new=AsyncMock(return_value={"status": "unhealthy", "error": "down"}),
        ):
            response = test_client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["database"] == "unhealthy"

    def test_root(self, test_client: TestClient) -> None:
        response = test_client.get("/")

        assert response.status_code == 200
        assert response.json()["health"] == "/health"
