"""Severity scoring for conflicting fields.

Scoring is advisory. It orders the review queue for staff and never
resolves a conflict.
"""

from typing import Dict, Iterable, List, Optional
from uuid import UUID

from app.config import settings
from app.schemas.ocr_insights import ConflictReport, LabelCollision, ScoredConflict, Severity
from app.services.reconciliation.constants import (
    CRITICAL_FIELDS,
    FIELD_RECOMMENDATIONS,
    HIGH_PRIORITY_FIELDS,
    HIGH_RISK_MIN_HIGH_CONFLICTS,
    MEDIUM_RISK_MIN_CONFLICTS,
)
from app.services.reconciliation.normalization import fold_text

# Conflicts below this mean confidence get a manual-verification note
LOW_CONFIDENCE_NOTE_THRESHOLD = 0.6


def _field_key(field_name: str) -> str:
    return fold_text(field_name)


def mean_confidence(confidences: Iterable[Optional[float]]) -> Optional[float]:
    """Mean of the known confidences, or None when none are known."""
    known = [c for c in confidences if c is not None]
    if not known:
        return None
    return sum(known) / len(known)


class ConflictSeverityScorer:
    """Scores conflicting fields and rolls them up into an overall risk."""

    def __init__(self, low_confidence_threshold: Optional[float] = None):
        """Initialize scorer.

        Args:
            low_confidence_threshold: Mean confidence below which an unlisted
                field is scored medium; defaults to settings
        """
        self.low_confidence_threshold = (
            settings.low_confidence_threshold
            if low_confidence_threshold is None
            else low_confidence_threshold
        )

    def severity_for(self, field_name: str, confidence: Optional[float] = None) -> Severity:
        """Severity of a conflict on one field."""
        key = _field_key(field_name)
        if key in CRITICAL_FIELDS:
            return Severity.CRITICAL
        if key in HIGH_PRIORITY_FIELDS:
            return Severity.HIGH
        if confidence is not None and confidence < self.low_confidence_threshold:
            return Severity.MEDIUM
        return Severity.LOW

    @staticmethod
    def recommendation_for(field_name: str, severity: Severity) -> str:
        """Follow-up action for a conflicting field."""
        base = FIELD_RECOMMENDATIONS.get(
            _field_key(field_name),
            f"Review all source documents for {field_name} and determine correct value",
        )
        if severity == Severity.CRITICAL:
            return f"URGENT: {base} - this discrepancy requires immediate resolution"
        if severity == Severity.HIGH:
            return f"HIGH PRIORITY: {base}"
        return base

    def score_collisions(self, collisions: Dict[str, LabelCollision]) -> List[ScoredConflict]:
        """Score every collision whose documents disagree on the value."""
        scored = []
        for label, collision in collisions.items():
            if not collision.conflict:
                continue
            confidence = mean_confidence(obs.confidence for obs in collision.observations)
            severity = self.severity_for(label, confidence)
            scored.append(
                ScoredConflict(
                    field_name=label,
                    conflicting_values=collision.observations,
                    severity=severity,
                    recommendation=self.recommendation_for(label, severity),
                    mean_confidence=confidence,
                )
            )
        return scored

    @staticmethod
    def overall_risk(conflicts: List[ScoredConflict]) -> Severity:
        """Roll individual severities up into one risk level."""
        critical = sum(1 for c in conflicts if c.severity == Severity.CRITICAL)
        high = sum(1 for c in conflicts if c.severity == Severity.HIGH)

        if critical > 0:
            return Severity.CRITICAL
        if high >= HIGH_RISK_MIN_HIGH_CONFLICTS:
            return Severity.HIGH
        if high >= 1 or len(conflicts) >= MEDIUM_RISK_MIN_CONFLICTS:
            return Severity.MEDIUM
        return Severity.LOW

    @staticmethod
    def recommendations(conflicts: List[ScoredConflict]) -> List[str]:
        """Report-level recommendations for a set of scored conflicts."""
        if not conflicts:
            return ["No significant field conflicts detected"]

        recommendations = []
        if any(c.severity == Severity.CRITICAL for c in conflicts):
            recommendations.append(
                "CRITICAL: Resolve all critical field discrepancies before proceeding"
            )
        if any(c.severity == Severity.HIGH for c in conflicts):
            recommendations.append(
                "Request additional documentation to resolve high-priority conflicts"
            )
        if len(conflicts) >= MEDIUM_RISK_MIN_CONFLICTS:
            recommendations.append(
                "Multiple field conflicts detected - conduct thorough document review"
            )
        if any(
            c.mean_confidence is not None and c.mean_confidence < LOW_CONFIDENCE_NOTE_THRESHOLD
            for c in conflicts
        ):
            recommendations.append(
                "Some conflicts involve low-confidence OCR - manual verification recommended"
            )
        recommendations.append("Verify all flagged fields with original source documents")
        return recommendations

    def build_report(
        self,
        collisions: Dict[str, LabelCollision],
        application_id: Optional[UUID] = None,
    ) -> ConflictReport:
        """Build the severity-scored conflict report for one application."""
        conflicts = self.score_collisions(collisions)
        return ConflictReport(
            application_id=application_id,
            total_conflicts=len(conflicts),
            critical_conflicts=sum(1 for c in conflicts if c.severity == Severity.CRITICAL),
            overall_risk=self.overall_risk(conflicts),
            conflicts=conflicts,
            recommendations=self.recommendations(conflicts),
        )
