"""Unit tests for value normalization."""

from decimal import Decimal

import pytest

from app.services.reconciliation.normalization import (
    EMPTY,
    NUMERIC,
    TEXT,
    distinct_normalized,
    fold_text,
    is_near_duplicate,
    normalize_value,
    similarity,
)


class TestNormalizeValue:

    @pytest.mark.parametrize("value", [None, "", "   ", "\t\n"])
    def test_empty(self, value):
        normalized = normalize_value(value)

        assert normalized.kind == EMPTY
        assert normalized.is_empty is True

    @pytest.mark.parametrize(
        "value, expected",
        [
            (125000, Decimal("125000")),
            (125000.5, Decimal("125000.5")),
            (Decimal("10.00"), Decimal("10")),
            ("125,000.00", Decimal("125000")),
            ("$1,200", Decimal("1200")),
            ("-1,200.50", Decimal("-1200.50")),
            ("CAD 118000", Decimal("118000")),
            ("118000 cad", Decimal("118000")),
            ("0.75", Decimal("0.75")),
        ],
    )
    def test_numeric(self, value, expected):
        normalized = normalize_value(value)

        assert normalized.kind == NUMERIC
        assert normalized.parsed == expected

    @pytest.mark.parametrize("value", ["0012345", "123-456-789", "1234 Jasper Ave", "12,34"])
    def test_identifier_like_strings_are_text(self, value):
        assert normalize_value(value).kind == TEXT

    def test_text_key_ignores_case_and_whitespace(self):
        a = normalize_value("  Northern   Lights ")
        b = normalize_value("NORTHERN LIGHTS")

        assert a.key == b.key
        assert a.raw == "Northern Lights"

    def test_booleans_are_text(self):
        assert normalize_value(True).kind == TEXT

    def test_display_formats_decimal(self):
        assert normalize_value("125,000.00").display == "125000"
        assert normalize_value("-0.0").display == "0"


class TestDistinctNormalized:

    def test_first_seen_order_and_empties_skipped(self):
        distinct = distinct_normalized(["b", None, "a", "B", 1, "1.00"])

        assert [v.display for v in distinct] == ["b", "a", "1"]


class TestSimilarity:

    def test_fold_text(self):
        assert fold_text("  Ｆｕｌｌ  WIDTH ") == "full width"

    def test_identical_after_folding(self):
        assert similarity("Acme  Ltd", "ACME LTD") == 1.0

    def test_near_duplicate_requires_all_pairs(self):
        distinct = distinct_normalized([
            "1234 Jasper Ave, Suite 900",
            "1234 Jasper Avenue, Ste 900",
            "PO Box 77",
        ])

        assert is_near_duplicate(distinct[:2], 0.85) is True
        assert is_near_duplicate(distinct, 0.85) is False

    def test_numbers_are_never_near_duplicates(self):
        distinct = distinct_normalized([125000, 125001])

        assert is_near_duplicate(distinct, 0.5) is False

    def test_single_value_is_not_near_duplicate(self):
        assert is_near_duplicate(distinct_normalized(["Acme"]), 0.85) is False
