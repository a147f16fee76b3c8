"""Label-anchored field extraction from raw OCR text.

Used for documents that have OCR text but no structured field rows. For
each required label the first match wins.
"""

import re
from typing import List, Optional, Pattern, Tuple

from app.schemas.ocr_insights import DocumentGroup, OcrFieldObservation
from app.services.ocr_insights.constants import (
    AMOUNT_FIELDS,
    BASE_CONFIDENCE,
    DOCUMENT_CATEGORIES,
    IDENTIFIER_FIELDS,
    REQUIRED_FIELDS,
)
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)

_AMOUNT_VALUE = r"[-+]?\$?\s*\d(?:[\d,]*\d)?(?:\.\d+)?"
_IDENTIFIER_VALUE = r"\+?\d[\d\- \t().]*\d"
_TEXT_VALUE = r"[^\n\r]+"

_SIN_DASHED = re.compile(r"^\d{3}-\d{3}-\d{3}$")
_SIN_PLAIN = re.compile(r"^\d{9}$")
_EMAIL = re.compile(r"@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
_PHONE = re.compile(r"^1?[2-9]\d{2}[2-9]\d{6}$")
_PLAIN_AMOUNT = re.compile(r"^\$?[\d,]+\.?\d*$")


def categorize_document(document_type: Optional[str]) -> str:
    """Map a stored document type to its display group."""
    if document_type:
        normalized = document_type.strip().lower()
        for group, types in DOCUMENT_CATEGORIES.items():
            if normalized in types:
                return group.value
    return DocumentGroup.OTHER.value


def score_confidence(label: str, value: str) -> float:
    """Heuristic confidence for a value extracted from free text."""
    confidence = BASE_CONFIDENCE

    if label in ("SIN", "SSN", "Social Insurance Number"):
        if _SIN_DASHED.match(value):
            confidence = 0.95
        elif _SIN_PLAIN.match(value):
            confidence = 0.90

    if "Email" in label and _EMAIL.search(value):
        confidence = 0.95

    if "Phone" in label and _PHONE.match(re.sub(r"\D", "", value)):
        confidence = 0.95

    if any(word in label for word in ("Revenue", "Income", "Assets")):
        if _PLAIN_AMOUNT.match(value):
            confidence = 0.85

    return confidence


class FieldExtractor:
    """Extracts required labels from OCR text."""

    def __init__(self, max_value_length: int = 100):
        """Initialize extractor.

        Args:
            max_value_length: Values at or above this length are discarded
        """
        self.max_value_length = max_value_length
        self._patterns: List[Tuple[str, Pattern[str]]] = [
            (label, self._compile(label)) for label in REQUIRED_FIELDS
        ]

    @staticmethod
    def _compile(label: str) -> Pattern[str]:
        if label in AMOUNT_FIELDS:
            value = _AMOUNT_VALUE
        elif label in IDENTIFIER_FIELDS:
            value = _IDENTIFIER_VALUE
        else:
            value = _TEXT_VALUE
        name = r"\s+".join(re.escape(part) for part in label.split())
        return re.compile(
            rf"(?<![\w]){name}(?![\w])\s*[:#]?\s*(?P<value>{value})",
            re.IGNORECASE,
        )

    def extract(
        self,
        text: str,
        doc_id: str,
        group: str,
        source_name: Optional[str] = None,
    ) -> List[OcrFieldObservation]:
        """Extract field observations from one document's OCR text.

        Args:
            text: Raw OCR text
            doc_id: Document identifier
            group: Display group of the document
            source_name: Document file name

        Returns:
            Observations in REQUIRED_FIELDS order
        """
        if not text:
            return []

        # Longer labels claim their text first so "Address" never matches
        # inside "Email Address".
        claimed: List[Tuple[int, int]] = []
        found = {}
        for label, pattern in sorted(self._patterns, key=lambda item: -len(item[0])):
            for match in pattern.finditer(text):
                start = match.start()
                if any(lo <= start < hi for lo, hi in claimed):
                    continue
                claimed.append((start, match.start("value")))
                found[label] = match.group("value").strip()
                break

        observations = []
        for label, _ in self._patterns:
            value = found.get(label)
            if not value or len(value) >= self.max_value_length:
                continue
            observations.append(
                OcrFieldObservation(
                    doc_id=doc_id,
                    group=group,
                    label=label,
                    value=value,
                    confidence=score_confidence(label, value),
                    source_name=source_name,
                )
            )

        LOGGER.debug(
            "Extracted fields from OCR text",
            extra={"doc_id": doc_id, "field_count": len(observations)}
        )
        return observations
