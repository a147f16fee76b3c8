"""Centralized dependency injection for FastAPI application.

This module provides factory functions for creating service and repository
instances. Routes depend on these factories so tests can swap them through
``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database.base import async_session_maker, get_async_session
from app.repositories.application_repository import ApplicationRepository
from app.services.ocr_insights.ocr_insights_service import OcrInsightsService
from app.services.reconciliation.reconciliation_service import ReconciliationService
from app.services.reconciliation.severity import ConflictSeverityScorer
from app.services.reconciliation.sources import (
    BankingFieldSource,
    ClientFormSource,
    OcrFieldSource,
)
from app.services.reconciliation.value_collector import ValueCollector


async def get_application_repository(
    db_session: Annotated[AsyncSession, Depends(get_async_session)]
) -> ApplicationRepository:
    """Get application repository instance.

    Args:
        db_session: Database session from dependency injection

    Returns:
        ApplicationRepository: Repository for application lookups
    """
    return ApplicationRepository(db_session)


async def get_value_collector(
    application_repo: Annotated[ApplicationRepository, Depends(get_application_repository)]
) -> ValueCollector:
    """Get value collector wired to every database-backed field source.

    Sources open their own sessions so they can be read concurrently.

    Args:
        application_repo: Application repository for the existence check

    Returns:
        ValueCollector: Collector over banking, client and OCR sources
    """
    return ValueCollector(
        applications=application_repo,
        sources=[
            BankingFieldSource(async_session_maker),
            ClientFormSource(async_session_maker),
            OcrFieldSource(async_session_maker),
        ],
        timeout=settings.source_fetch_timeout_seconds,
    )


async def get_severity_scorer() -> ConflictSeverityScorer:
    """Get severity scorer configured from settings."""
    return ConflictSeverityScorer(low_confidence_threshold=settings.low_confidence_threshold)


async def get_reconciliation_service(
    collector: Annotated[ValueCollector, Depends(get_value_collector)],
    scorer: Annotated[ConflictSeverityScorer, Depends(get_severity_scorer)],
) -> ReconciliationService:
    """Get reconciliation service instance.

    Args:
        collector: Value collector from dependency injection
        scorer: Severity scorer from dependency injection

    Returns:
        ReconciliationService: Service building per-column conflict views
    """
    return ReconciliationService(collector=collector, scorer=scorer)


async def get_ocr_insights_service(
    db_session: Annotated[AsyncSession, Depends(get_async_session)],
    scorer: Annotated[ConflictSeverityScorer, Depends(get_severity_scorer)],
) -> OcrInsightsService:
    """Get OCR insights service instance.

    Args:
        db_session: Database session from dependency injection
        scorer: Severity scorer from dependency injection

    Returns:
        OcrInsightsService: Service building grouped OCR views
    """
    return OcrInsightsService(db_session, scorer=scorer)
