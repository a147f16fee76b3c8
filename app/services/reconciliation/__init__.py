"""Field reconciliation: value collection, conflict detection and severity scoring."""

from app.services.reconciliation.conflict_engine import build_conflicts
from app.services.reconciliation.contracts import ApplicationLookup, FieldSource
from app.services.reconciliation.reconciliation_service import ReconciliationService
from app.services.reconciliation.severity import ConflictSeverityScorer
from app.services.reconciliation.sources import (
    BankingFieldSource,
    ClientFormSource,
    OcrFieldSource,
)
from app.services.reconciliation.value_collector import ValueCollector

__all__ = [
    "build_conflicts",
    "ApplicationLookup",
    "FieldSource",
    "ReconciliationService",
    "ConflictSeverityScorer",
    "BankingFieldSource",
    "ClientFormSource",
    "OcrFieldSource",
    "ValueCollector",
]
