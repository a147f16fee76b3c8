"""OCR insight view builder.

Groups per-document field observations by document group and indexes labels
reported by more than one document. A label spanning unrelated document
groups (a SIN on both a tax return and a contract) is surfaced whether or
not the values agree.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from app.config import settings
from app.schemas.ocr_insights import (
    DocumentGroup,
    LabelCollision,
    OcrFieldObservation,
    OcrInsightView,
)
from app.services.reconciliation.grouping import flag_disagreement, group_by_key
from app.services.reconciliation.normalization import fold_text
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)

ObservationInput = Union[OcrFieldObservation, Dict[str, Any]]


def _coerce_observations(
    observations: Iterable[ObservationInput],
) -> List[OcrFieldObservation]:
    coerced = []
    for observation in observations:
        if not isinstance(observation, OcrFieldObservation):
            try:
                observation = OcrFieldObservation.model_validate(observation)
            except PydanticValidationError as e:
                LOGGER.debug(
                    "Dropping malformed OCR observation",
                    extra={"error_count": e.error_count()},
                )
                continue
        if not observation.label.strip():
            LOGGER.debug(
                "Dropping OCR observation without a label",
                extra={"doc_id": observation.doc_id},
            )
            continue
        if not observation.group.strip():
            observation = observation.model_copy(update={"group": DocumentGroup.OTHER.value})
        coerced.append(observation)
    return coerced


def _unique(items: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(items))


def build_label_collisions(
    observations: Sequence[OcrFieldObservation],
    near_duplicate_threshold: float,
) -> Dict[str, LabelCollision]:
    """Index labels that appear under two or more distinct documents.

    Labels are matched case- and whitespace-insensitively; the first-seen
    spelling is used as the key.
    """
    by_label = group_by_key(observations, key=lambda obs: fold_text(obs.label))

    collisions: Dict[str, LabelCollision] = {}
    for members in by_label.values():
        doc_ids = _unique(obs.doc_id for obs in members)
        if len(doc_ids) < 2:
            continue

        disagreement = flag_disagreement(
            (obs.value for obs in members), near_duplicate_threshold
        )
        groups = _unique(obs.group for obs in members)
        label = members[0].label.strip()
        collisions[label] = LabelCollision(
            label=label,
            doc_ids=doc_ids,
            groups=groups,
            observations=members,
            conflict=disagreement.conflict,
            cross_group=len(groups) > 1,
            near_duplicate=disagreement.near_duplicate,
        )

    return collisions


def build_ocr_view(
    observations: Iterable[ObservationInput],
    unmatched_documents: Optional[Iterable[str]] = None,
    near_duplicate_threshold: Optional[float] = None,
) -> OcrInsightView:
    """Build the grouped-and-flagged OCR view.

    Args:
        observations: Field observations in extraction order
        unmatched_documents: Documents that produced no fields
        near_duplicate_threshold: Similarity for near-duplicate values;
            defaults to settings

    Returns:
        OcrInsightView: Groups, label collisions and unmatched documents
    """
    threshold = (
        settings.near_duplicate_threshold
        if near_duplicate_threshold is None
        else near_duplicate_threshold
    )
    coerced = _coerce_observations(observations)

    view = OcrInsightView(
        groups=group_by_key(coerced, key=lambda obs: obs.group),
        collisions=build_label_collisions(coerced, threshold),
        unmatched_documents=list(unmatched_documents or []),
    )

    LOGGER.debug(
        "Built OCR insight view",
        extra={
            "observation_count": len(coerced),
            "group_count": len(view.groups),
            "collision_count": len(view.collisions),
        },
    )
    return view
