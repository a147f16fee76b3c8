"""Group-and-flag primitive shared by the conflict engine and the OCR view builder."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

from app.services.reconciliation.normalization import (
    NormalizedValue,
    distinct_normalized,
    is_near_duplicate,
)

T = TypeVar("T")


@dataclass
class Disagreement:
    """Value agreement summary for one group of observations."""
    distinct: List[NormalizedValue] = field(default_factory=list)
    near_duplicate: bool = False

    @property
    def conflict(self) -> bool:
        return len(self.distinct) > 1

    @property
    def distinct_display(self) -> List[str]:
        return [value.display for value in self.distinct]


def group_by_key(
    items: Iterable[T],
    key: Callable[[T], Optional[str]],
) -> Dict[str, List[T]]:
    """Group items by key, keeping first-seen key order and input order per key.

    Items whose key is None or blank are dropped.
    """
    groups: Dict[str, List[T]] = {}
    for item in items:
        group_key = key(item)
        if group_key is None or not str(group_key).strip():
            continue
        groups.setdefault(group_key, []).append(item)
    return groups


def flag_disagreement(
    values: Iterable[Any],
    near_duplicate_threshold: float,
) -> Disagreement:
    """Summarize whether a group's values disagree after normalization."""
    distinct = distinct_normalized(values)
    return Disagreement(
        distinct=distinct,
        near_duplicate=is_near_duplicate(distinct, near_duplicate_threshold),
    )
