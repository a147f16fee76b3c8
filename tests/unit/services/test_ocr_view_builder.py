"""Unit tests for the OCR insight view builder."""

import logging

import pytest

from app.schemas.ocr_insights import OcrFieldObservation
from app.services.ocr_insights.view_builder import build_ocr_view


def _obs(doc_id, label, value, group="Other", confidence=None):
    return OcrFieldObservation(
        doc_id=doc_id, group=group, label=label, value=value, confidence=confidence
    )


class TestLabelCollisions:

    def test_same_sin_across_groups_is_flagged_without_conflict(self, sin_observations):
        """A SIN on a tax return and a contract collides even though the values agree."""
        view = build_ocr_view(sin_observations)

        collision = view.collisions["SIN"]
        assert collision.doc_ids == ["doc-tax", "doc-contract"]
        assert collision.groups == ["Taxes", "Contracts"]
        assert collision.cross_group is True
        assert collision.conflict is False

    def test_single_document_label_is_not_a_collision(self):
        view = build_ocr_view([
            _obs("doc-1", "Net Income", "125000"),
            _obs("doc-1", "Net Income", "118000"),
            _obs("doc-2", "Business Name", "Acme"),
        ])

        assert view.collisions == {}

    def test_disagreeing_values_conflict(self):
        view = build_ocr_view([
            _obs("doc-1", "Net Income", "$125,000", group="Income Statement"),
            _obs("doc-2", "Net Income", "118,000", group="Income Statement"),
        ])

        collision = view.collisions["Net Income"]
        assert collision.conflict is True
        assert collision.cross_group is False

    def test_labels_match_case_insensitively(self):
        view = build_ocr_view([
            _obs("doc-1", "Business Name", "Acme Ltd"),
            _obs("doc-2", " business  name ", "ACME LTD"),
        ])

        assert list(view.collisions) == ["Business Name"]
        assert view.collisions["Business Name"].conflict is False

    @pytest.mark.parametrize(
        "doc_ids, expected",
        [
            (["a"], False),
            (["a", "a"], False),
            (["a", "b"], True),
            (["a", "b", "c"], True),
        ],
    )
    def test_collision_requires_two_documents(self, doc_ids, expected):
        view = build_ocr_view([_obs(doc_id, "SIN", "123-456-789") for doc_id in doc_ids])

        assert ("SIN" in view.collisions) is expected

    def test_spelling_variants_are_near_duplicates(self):
        view = build_ocr_view(
            [
                _obs("doc-1", "Business Address", "1234 Jasper Ave, Suite 900"),
                _obs("doc-2", "Business Address", "1234 Jasper Avenue, Ste 900"),
            ],
            near_duplicate_threshold=0.85,
        )

        collision = view.collisions["Business Address"]
        assert collision.conflict is True
        assert collision.near_duplicate is True


class TestGroups:

    def test_groups_keep_first_seen_order(self):
        view = build_ocr_view([
            _obs("doc-1", "SIN", "1", group="Taxes"),
            _obs("doc-2", "Client", "Acme", group="Contracts"),
            _obs("doc-3", "Net Income", "5", group="Taxes"),
        ])

        assert list(view.groups) == ["Taxes", "Contracts"]
        assert [o.doc_id for o in view.groups["Taxes"]] == ["doc-1", "doc-3"]

    def test_blank_group_falls_back_to_other(self):
        view = build_ocr_view([_obs("doc-1", "SIN", "1", group="  ")])

        assert list(view.groups) == ["Other"]

    def test_malformed_observations_are_dropped(self):
        view = build_ocr_view([
            {"doc_id": "doc-1", "label": "", "value": "x"},
            {"label": "SIN", "value": "x"},
            {"doc_id": "doc-2", "label": "SIN", "value": "123"},
        ])

        assert [o.doc_id for o in view.groups["Other"]] == ["doc-2"]

    def test_unmatched_documents_are_passed_through(self):
        view = build_ocr_view([], unmatched_documents=["scan.pdf"])

        assert view.groups == {}
        assert view.collisions == {}
        assert view.unmatched_documents == ["scan.pdf"]

    def test_blank_labels_are_logged_when_dropped(self, caplog):
        caplog.set_level(logging.DEBUG, logger="app.services.ocr_insights.view_builder")

        view = build_ocr_view([{"doc_id": "doc-1", "label": "  ", "value": "x"}])

        assert view.groups == {}
        assert "Dropping OCR observation without a label" in caplog.text


class TestLooselyTypedObservations:
    """Observations from loosely typed stores are normalized, not rejected."""

    def test_percentage_confidence_keeps_the_collision(self):
        view = build_ocr_view([
            {"doc_id": "doc-tax", "group": "Taxes", "label": "SIN", "value": "123-456-789", "confidence": 95},
            {"doc_id": "doc-contract", "group": "Contracts", "label": "SIN", "value": "123-456-789", "confidence": 0.9},
        ])

        collision = view.collisions["SIN"]
        assert collision.doc_ids == ["doc-tax", "doc-contract"]
        assert [o.confidence for o in collision.observations] == [0.95, 0.9]

    def test_numeric_values_and_ids_are_rendered_as_text(self):
        view = build_ocr_view([
            {"doc_id": 101, "group": "Taxes", "label": "Net Income", "value": 125000},
            {"doc_id": 102, "group": "Taxes", "label": "Net Income", "value": None},
        ])

        observations = view.groups["Taxes"]
        assert [(o.doc_id, o.value) for o in observations] == [("101", "125000"), ("102", "")]
        assert view.collisions["Net Income"].conflict is False
