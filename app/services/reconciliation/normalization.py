"""Value normalization for disagreement detection.

Every observed value is reduced to a ``NormalizedValue`` tagged as text,
numeric or empty. Two observations agree when their comparison keys are
equal:

- numeric: real numbers and amount-like strings, compared by exact
  ``Decimal`` equality ("125,000.00" agrees with 125000)
- text: NFKC, trimmed, inner whitespace collapsed, casefolded
- empty: None or blank; never counts as a distinct value
"""

import math
import unicodedata
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Hashable, Iterable, List, Optional, Tuple

from rapidfuzz import fuzz

from app.services.reconciliation.constants import AMOUNT_PATTERN, WHITESPACE_PATTERN

TEXT = "text"
NUMERIC = "numeric"
EMPTY = "empty"


@dataclass(frozen=True)
class NormalizedValue:
    """Normalized form of one observed value."""
    kind: str
    raw: str
    key: Hashable
    parsed: Optional[Decimal] = None

    @property
    def is_empty(self) -> bool:
        return self.kind == EMPTY

    @property
    def display(self) -> str:
        if self.parsed is not None:
            return _format_decimal(self.parsed)
        return self.raw


def _format_decimal(value: Decimal) -> str:
    text = format(value.normalize(), "f")
    return "0" if text in ("-0", "+0") else text


def _parse_amount(text: str) -> Optional[Decimal]:
    """Parse an amount-like string, or return None if it is not one.

    Digit strings with a leading zero ("0012345") are identifiers, not amounts.
    """
    match = AMOUNT_PATTERN.match(text.upper())
    if not match:
        return None

    number = match.group("number")
    fraction = match.group("fraction") or ""
    if len(number) > 1 and number.startswith("0") and not fraction:
        return None

    try:
        amount = Decimal(number.replace(",", "") + fraction)
    except InvalidOperation:
        return None
    return -amount if match.group("sign") == "-" else amount


def fold_text(value: str) -> str:
    """Case- and whitespace-insensitive form of a string."""
    value = unicodedata.normalize("NFKC", value)
    return WHITESPACE_PATTERN.sub(" ", value).strip().casefold()


def normalize_value(value: Any) -> NormalizedValue:
    """Normalize an observed value.

    Args:
        value: Observed value (str, int, float, Decimal or None)

    Returns:
        NormalizedValue: Tagged normalized value
    """
    if value is None:
        return NormalizedValue(kind=EMPTY, raw="", key=None)

    if isinstance(value, bool):
        raw = str(value).lower()
        return NormalizedValue(kind=TEXT, raw=raw, key=(TEXT, raw))

    if isinstance(value, (int, Decimal)) or (
        isinstance(value, float) and math.isfinite(value)
    ):
        parsed = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
        if parsed.is_finite():
            return NormalizedValue(
                kind=NUMERIC, raw=str(value), key=(NUMERIC, parsed), parsed=parsed
            )

    raw = WHITESPACE_PATTERN.sub(" ", unicodedata.normalize("NFKC", str(value))).strip()
    if not raw:
        return NormalizedValue(kind=EMPTY, raw="", key=None)

    amount = _parse_amount(raw)
    if amount is not None:
        return NormalizedValue(kind=NUMERIC, raw=raw, key=(NUMERIC, amount), parsed=amount)

    return NormalizedValue(kind=TEXT, raw=raw, key=(TEXT, raw.casefold()))


def distinct_normalized(values: Iterable[Any]) -> List[NormalizedValue]:
    """Distinct non-empty normalized values in first-seen order."""
    seen = set()
    distinct = []
    for value in values:
        normalized = normalize_value(value)
        if normalized.is_empty or normalized.key in seen:
            continue
        seen.add(normalized.key)
        distinct.append(normalized)
    return distinct


def similarity(a: str, b: str) -> float:
    """Similarity of two strings in [0, 1] after folding."""
    return fuzz.ratio(fold_text(a), fold_text(b)) / 100.0


def is_near_duplicate(distinct: List[NormalizedValue], threshold: float) -> bool:
    """Whether conflicting values look like spelling variants of one value.

    Only text values qualify; every pair must reach ``threshold``.
    """
    if len(distinct) < 2 or any(v.kind != TEXT for v in distinct):
        return False

    pairs: List[Tuple[NormalizedValue, NormalizedValue]] = [
        (a, b) for i, a in enumerate(distinct) for b in distinct[i + 1:]
    ]
    return all(similarity(a.raw, b.raw) >= threshold for a, b in pairs)
