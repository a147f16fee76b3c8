"""Conflict/reconciliation engine.

Folds a flat list of sourced values into one ``ColumnConflictRecord`` per
column. The engine only flags disagreement; it never picks an authoritative
value.
"""

from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from app.config import settings
from app.schemas.reconciliation import ColumnConflictRecord, SourcedValue
from app.services.reconciliation.grouping import flag_disagreement, group_by_key
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)

RecordInput = Union[SourcedValue, Dict[str, Any]]


def _coerce_records(records: Iterable[RecordInput]) -> List[SourcedValue]:
    """Validate raw records, dropping only those without a usable column.

    Unknown source types, missing labels, odd value types and unreadable
    confidences are absorbed by ``SourcedValue`` itself.
    """
    coerced = []
    for record in records:
        if isinstance(record, SourcedValue):
            coerced.append(record)
            continue

        column = record.get("column") if isinstance(record, dict) else None
        if column is None or not str(column).strip():
            LOGGER.debug("Dropping sourced value without a column")
            continue

        try:
            coerced.append(SourcedValue.model_validate({**record, "column": str(column)}))
        except PydanticValidationError as e:
            LOGGER.debug(
                "Dropping malformed sourced value",
                extra={"column": str(column), "error_count": e.error_count()},
            )
    return coerced


def build_conflicts(
    records: Iterable[RecordInput],
    near_duplicate_threshold: Optional[float] = None,
) -> Dict[str, ColumnConflictRecord]:
    """Build the per-column conflict view.

    Args:
        records: Sourced values in collection order
        near_duplicate_threshold: Similarity needed for conflicting text
            values to be reported as near-duplicates; defaults to settings

    Returns:
        Mapping of column to its conflict record, in first-seen column order
    """
    threshold = (
        settings.near_duplicate_threshold
        if near_duplicate_threshold is None
        else near_duplicate_threshold
    )

    by_column = group_by_key(
        _coerce_records(records),
        key=lambda record: record.column,
    )

    columns: Dict[str, ColumnConflictRecord] = {}
    for column, values in by_column.items():
        disagreement = flag_disagreement(
            (value.value for value in values), threshold
        )
        columns[column] = ColumnConflictRecord(
            conflict=disagreement.conflict,
            values=values,
            distinct_values=disagreement.distinct_display,
            near_duplicate=disagreement.near_duplicate,
        )

    return columns
