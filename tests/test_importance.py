"""
Tests for importances, correlations, confidence and the explanation text.

These tests verify:
1. Importance scaling and the zero-weight floor
2. Correlation and confidence bounds
3. Binary fields split into a "more" / "less" pair
4. Group ordering and removal of zero-importance entries
5. Explanation phrasing per column type
"""

import numpy as np
import pytest

from lookalike.column_types import ColumnType
from lookalike.engine import analyze_and_predict
from lookalike.explanations import (
    NEGATIVE,
    POSITIVE,
    binary_poles,
    binary_values,
    generate_explanation,
)
from lookalike.importance import (
    FeatureImportance,
    confidence_score,
    importance_scores,
    order_importances,
    point_biserial,
)


def entry(field, importance, column=""):
    return FeatureImportance(field, importance, 0.0, 50, POSITIVE, "", column=column)


def gender_dataset():
    members = [{"gender": "Female", "visits": str(5 + i % 3)} for i in range(20)]
    contacts = [{"gender": "Male", "visits": str(i % 4)} for i in range(20)]
    return members, contacts


# =============================================================================
# SCORES
# =============================================================================

class TestScores:

    def test_importance_relative_to_largest_weight(self):
        assert importance_scores(np.array([0.5, -1.0, 0.0])) == [50, 100, 0]

    def test_all_zero_weights(self):
        assert importance_scores(np.zeros(3)) == [0, 0, 0]

    def test_point_biserial(self):
        labels = np.array([1, 1, 0, 0])
        assert point_biserial(np.array([1.0, 1.0, 0.0, 0.0]), labels) == pytest.approx(1.0)
        assert point_biserial(np.array([0.0, 0.0, 1.0, 1.0]), labels) == pytest.approx(-1.0)
        assert point_biserial(np.array([0.3, 0.3, 0.3, 0.3]), labels) == 0.0

    def test_confidence_bounds(self):
        assert confidence_score(np.ones(100), np.zeros(100)) == 99
        assert confidence_score(np.full(5, 0.5), np.full(5, 0.5)) == 1

    def test_confidence_formula(self):
        # diff 0.2, min(n) 10 -> round(0.2 * 100 * 1) = 20
        assert confidence_score(np.full(10, 0.6), np.full(40, 0.4)) == 20


# =============================================================================
# ORDERING
# =============================================================================

class TestOrdering:

    def test_groups_sorted_by_best_member_and_zeros_dropped(self):
        entries = [
            entry("program::Arts", 30, "program"),
            entry("age", 60, "age"),
            entry("program::Fitness", 80, "program"),
            entry("region::North", 0, "region"),
        ]
        ordered = order_importances(entries)
        assert [e.field for e in ordered] == ["program::Arts", "program::Fitness", "age"]

    def test_ties_keep_input_order(self):
        ordered = order_importances([entry("a", 50, "a"), entry("b", 50, "b")])
        assert [e.field for e in ordered] == ["a", "b"]


# =============================================================================
# BINARY PAIRS (end-to-end)
# =============================================================================

class TestBinaryPairs:

    @pytest.fixture(scope="class")
    def importances(self):
        members, contacts = gender_dataset()
        return analyze_and_predict(members, contacts).feature_importances

    def test_pair_is_adjacent_and_mirrored(self, importances):
        fields = [fi.field for fi in importances]
        more = fields.index("gender (Female)")
        assert fields[more + 1] == "gender (Male)"

        primary, complement = importances[more], importances[more + 1]
        assert primary.direction == POSITIVE
        assert complement.direction == NEGATIVE
        assert primary.importance == complement.importance
        assert primary.confidence == complement.confidence
        assert primary.correlation == pytest.approx(-complement.correlation)
        assert primary.correlation > 0

    def test_explanations_name_both_values(self, importances):
        by_field = {fi.field: fi for fi in importances}
        assert by_field["gender (Female)"].explanation.startswith(
            "Female individuals are more likely to be members than Male individuals"
        )
        assert "complementary" in by_field["gender (Male)"].explanation

    def test_bounds(self, importances):
        for fi in importances:
            assert 0 < fi.importance <= 100
            assert -1.0 <= fi.correlation <= 1.0
            assert 1 <= fi.confidence <= 99
            assert fi.direction in (POSITIVE, NEGATIVE)


def test_constant_column_is_dropped():
    members, contacts = gender_dataset()
    for row in members + contacts:
        row["region"] = "North"
    result = analyze_and_predict(members, contacts)
    assert not any(fi.field.startswith("region") for fi in result.feature_importances)


# =============================================================================
# EXPLANATIONS
# =============================================================================

class TestExplanations:

    def test_categorical(self):
        text = generate_explanation("program::Aquatics", ColumnType.CATEGORICAL, POSITIVE, 40, 60)
        assert text == (
            'Having "Aquatics" as program is associated with higher membership likelihood '
            "(40% correlation, 60% confidence)."
        )

    def test_days_since_negative_weight_reads_as_recent_visits(self):
        text = generate_explanation("last_visit", ColumnType.DAYS_SINCE, NEGATIVE, 35, 70)
        assert text.startswith("People who visited more recently")
        assert "(35% correlation, 70% confidence)" in text

    def test_distance_positive_is_unusual(self):
        text = generate_explanation("distance_mi", ColumnType.DISTANCE, POSITIVE, 10, 20)
        assert "unusual" in text
        assert "Columbia" in text

    def test_birth_dates(self):
        text = generate_explanation("birth_date", ColumnType.DATE, NEGATIVE, 10, 20)
        assert text.startswith("Older individuals (earlier birthdates)")

    def test_numeric_uses_friendly_name(self):
        text = generate_explanation("visits_last_year", ColumnType.NUMERIC, POSITIVE, 50, 50)
        assert text.startswith("Higher visits last year values correlate with membership")

    def test_binary_values_case_insensitive(self):
        records = [{"gender": "Female"}, {"gender": "female"}, {"gender": "Male"}, {"gender": ""}]
        assert binary_values(records, "gender") == ("Female", "Male")
        assert binary_values([{"gender": "F"}], "gender") is None

    def test_binary_poles(self):
        assert binary_poles(("Female", "Male"), ColumnType.BINARY_GENDER) == ("Male", "Female")
        assert binary_poles(("Parent", "Non-Parent"), ColumnType.BINARY_PARENTAL) == ("Parent", "Non-Parent")
