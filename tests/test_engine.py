"""
End-to-end tests for analyze_and_predict().

These tests verify:
1. Member traits get positive weights and top-ranked contacts resemble members
2. Input errors and cancellation surface as exceptions
3. Identical inputs give identical results
4. Geo enrichment feeds the residency fields into the model
"""

import pandas as pd
import pytest

from lookalike.config import EngineConfig
from lookalike.engine import NO_COMMON_COLUMNS, InputError, analyze_and_predict
from lookalike.geo import DISTANCE_FIELD, RESIDENT_FIELD
from lookalike.model import AnalysisCancelled


def person(age, visits, **extra):
    return {"age": str(age), "visits": str(visits), **extra}


MEMBERS = [person(40, 10) for _ in range(50)]
CONTACTS = [person(22, 1) for _ in range(50)]


# =============================================================================
# CORE PIPELINE
# =============================================================================

class TestAnalyzeAndPredict:

    def test_separable_lists(self):
        result = analyze_and_predict(MEMBERS, CONTACTS)
        assert result.model_accuracy == 100
        assert result.total_members == 50
        assert result.total_contacts == 50
        assert (result.model.weights > 0).all()

        fields = {fi.field: fi for fi in result.feature_importances}
        assert set(fields) == {"age", "visits"}
        assert all(fi.direction == "positive" for fi in fields.values())
        assert fields["age"].explanation.startswith("Older individuals")

    def test_member_like_contacts_rank_first(self):
        contacts = CONTACTS + [person(45, 12, name="lookalike"), person(20, 0, name="outlier")]
        result = analyze_and_predict(MEMBERS, contacts)
        assert len(result.predictions) == 52
        assert result.predictions[0].original_data["name"] == "lookalike"
        assert result.predictions[-1].original_data["name"] == "outlier"
        assert result.predictions[0].score > result.predictions[-1].score

    def test_scores_and_factors_bounded(self):
        result = analyze_and_predict(MEMBERS, CONTACTS)
        scores = [p.score for p in result.predictions]
        assert scores == sorted(scores, reverse=True)
        for p in result.predictions:
            assert 1 <= p.score <= 100
            assert len(p.factors) <= 10

    def test_inclusion_list_limits_columns(self):
        result = analyze_and_predict(MEMBERS, CONTACTS, columns=["age"])
        assert [fi.field for fi in result.feature_importances] == ["age"]
        assert [s.name for s in result.column_specs] == ["age"]

    def test_deterministic(self):
        a = analyze_and_predict(MEMBERS, CONTACTS)
        b = analyze_and_predict(MEMBERS, CONTACTS)
        assert a.to_dict() == b.to_dict()

    def test_injected_clock_for_visit_dates(self):
        members = [{"last_visit": "2024-06-25"} for _ in range(20)]
        contacts = [{"last_visit": "2023-01-01"} for _ in range(20)]
        result = analyze_and_predict(members, contacts, now=pd.Timestamp("2024-06-30", tz="UTC"))
        (fi,) = result.feature_importances
        assert fi.direction == "negative"
        assert fi.explanation.startswith("People who visited more recently")

    def test_to_dict_keys(self):
        out = analyze_and_predict(MEMBERS, CONTACTS).to_dict()
        assert set(out) == {"featureImportances", "predictions", "modelAccuracy", "totalMembers", "totalContacts"}
        assert set(out["featureImportances"][0]) == {
            "field", "importance", "correlation", "confidence", "direction", "explanation",
        }
        assert set(out["predictions"][0]) == {"originalData", "score", "factors"}

    def test_validation_accuracy(self):
        result = analyze_and_predict(
            MEMBERS, CONTACTS, config=EngineConfig(validation_fraction=0.2, iterations=500)
        )
        assert result.validation_accuracy == 100
        assert result.to_dict()["validationAccuracy"] == 100


# =============================================================================
# ERRORS
# =============================================================================

class TestErrors:

    def test_no_shared_columns(self):
        with pytest.raises(InputError, match="No common columns"):
            analyze_and_predict([{"a": "1"}], [{"b": "2"}])

    def test_everything_excluded(self):
        with pytest.raises(InputError) as exc:
            analyze_and_predict(MEMBERS, CONTACTS, columns=["email"])
        assert str(exc.value) == NO_COMMON_COLUMNS

    def test_input_error_is_value_error(self):
        assert issubclass(InputError, ValueError)

    def test_cancel(self):
        with pytest.raises(AnalysisCancelled):
            analyze_and_predict(MEMBERS, CONTACTS, cancel=lambda: True)

    def test_bad_config(self):
        with pytest.raises(ValueError):
            EngineConfig(learning_rate=0)


# =============================================================================
# GEO ENRICHMENT
# =============================================================================

class TestGeoEnrichment:

    @pytest.fixture(scope="class")
    def result(self):
        members = [
            person(35 + i % 5, 5, address=f"{i} Main St, Columbia, MD 21044") for i in range(20)
        ]
        contacts = [
            person(35 + i % 5, 5, address=f"{i} Park Ave, Baltimore, MD 21201") for i in range(20)
        ]
        return analyze_and_predict(
            members, contacts, columns=["age", RESIDENT_FIELD, DISTANCE_FIELD], geo=True,
        )

    def test_synthetic_fields_added_to_predictions(self, result):
        data = result.predictions[0].original_data
        assert data[RESIDENT_FIELD] == "no"
        assert float(data[DISTANCE_FIELD]) > 0

    def test_residency_drives_the_model(self, result):
        fields = [fi.field for fi in result.feature_importances]
        assert RESIDENT_FIELD in fields
        top = result.feature_importances[0]
        assert top.field in (RESIDENT_FIELD, DISTANCE_FIELD)

    def test_distance_reads_as_proximity(self, result):
        by_field = {fi.field: fi for fi in result.feature_importances}
        assert by_field[DISTANCE_FIELD].direction == "negative"
        assert "Closer proximity to Columbia" in by_field[DISTANCE_FIELD].explanation

    def test_geo_without_address_field_is_ignored(self):
        result = analyze_and_predict(MEMBERS, CONTACTS, geo=True)
        assert RESIDENT_FIELD not in result.predictions[0].original_data


class TestMixedColumnTypes:

    def test_every_single_feature_type_runs(self):
        def row(age, visits, last, active, gender, dist):
            return {"age": age, "visits": visits, "last_visit": last, "active": active,
                    "gender": gender, "distance_mi": dist}

        members = [row("40", "10", "2024-06-20", "yes", "Female", "2") for _ in range(10)]
        contacts = [row("22", "1", "2023-01-01", "no", "Male", "30") for _ in range(10)]
        result = analyze_and_predict(members, contacts, now=pd.Timestamp("2024-06-30", tz="UTC"))
        assert result.model_accuracy == 100
        assert {s.name: s.column_type.value for s in result.column_specs} == {
            "age": "age", "visits": "numeric", "last_visit": "days_since",
            "active": "boolean", "gender": "binary_gender", "distance_mi": "distance",
        }
